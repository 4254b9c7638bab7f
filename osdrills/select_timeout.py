"""Timeouts and races between awaitables."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], timeout_ms: int) -> Optional[T]:
    """Return the awaitable's result, or None if it takes longer than ``timeout_ms``."""
    if timeout_ms < 0:
        raise ValueError(f"timeout_ms must not be negative, got {timeout_ms}")
    try:
        return await asyncio.wait_for(awaitable, timeout_ms / 1000)
    except asyncio.TimeoutError:
        return None


async def race(f1: Awaitable[T], f2: Awaitable[T]) -> T:
    """Run both awaitables and return the result of whichever finishes first.

    The other one is cancelled. If the first to finish raised, that exception
    propagates.
    """
    first = asyncio.ensure_future(f1)
    second = asyncio.ensure_future(f2)
    try:
        done, _ = await asyncio.wait({first, second}, return_when=asyncio.FIRST_COMPLETED)
        winner = first if first in done else second
        return winner.result()
    finally:
        losers = [task for task in (first, second) if not task.done()]
        for task in losers:
            task.cancel()
        if losers:
            await asyncio.gather(*losers, return_exceptions=True)