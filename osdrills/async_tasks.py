"""Running many small asynchronous tasks concurrently."""

from __future__ import annotations

import asyncio


async def _square(i: int) -> int:
    return i * i


async def _sleep_then_return(task_id: int, duration_ms: int) -> int:
    await asyncio.sleep(duration_ms / 1000)
    return task_id


async def concurrent_squares(n: int) -> list[int]:
    """Compute ``i * i`` for each ``i`` in ``range(n)`` in separate tasks, in order."""
    tasks = [asyncio.create_task(_square(i)) for i in range(n)]
    return [await task for task in tasks]


async def parallel_sleep_tasks(n: int, duration_ms: int) -> list[int]:
    """Run ``n`` tasks that each sleep ``duration_ms`` and return their id.

    The tasks sleep concurrently; the ids are returned sorted.
    """
    if duration_ms < 0:
        raise ValueError(f"duration_ms must not be negative, got {duration_ms}")
    tasks = [asyncio.create_task(_sleep_then_return(i, duration_ms)) for i in range(n)]
    results = [await task for task in tasks]
    return sorted(results)