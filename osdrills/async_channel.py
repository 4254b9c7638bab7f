"""Producer/consumer and fan-in patterns over bounded asynchronous queues."""

from __future__ import annotations

import asyncio


class _Closed:
    """Marker a sender puts on the queue when it is done sending."""


_CLOSED = _Closed()


async def producer_consumer(items: list[str]) -> list[str]:
    """Send ``items`` through a bounded queue from one task to another.

    The consumer collects everything until the producer closes its end and
    returns the items in the order they were sent.
    """
    queue: asyncio.Queue[object] = asyncio.Queue(maxsize=max(len(items), 1))
    to_send = list(items)

    async def produce() -> None:
        for item in to_send:
            await queue.put(item)
        await queue.put(_CLOSED)

    async def consume() -> list[str]:
        received: list[str] = []
        while (item := await queue.get()) is not _CLOSED:
            received.append(item)  # type: ignore[arg-type]
        return received

    producer = asyncio.create_task(produce())
    consumer = asyncio.create_task(consume())
    await producer
    return await consumer


async def fan_in(n_producers: int) -> list[str]:
    """Collect one message from each of ``n_producers`` producer tasks, sorted.

    Producer ``i`` sends ``"producer {i}: message"``. At least one producer is
    required, since the shared queue is bounded by the producer count.
    """
    if n_producers < 1:
        raise ValueError("fan_in needs a channel capacity of at least one producer")
    queue: asyncio.Queue[object] = asyncio.Queue(maxsize=n_producers)

    async def produce(producer_id: int) -> None:
        await queue.put(f"producer {producer_id}: message")
        await queue.put(_CLOSED)

    producers = [asyncio.create_task(produce(i)) for i in range(n_producers)]

    messages: list[str] = []
    open_senders = n_producers
    while open_senders:
        item = await queue.get()
        if item is _CLOSED:
            open_senders -= 1
        else:
            messages.append(item)  # type: ignore[arg-type]

    await asyncio.gather(*producers)
    messages.sort()
    return messages