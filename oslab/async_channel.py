"""Producer-consumer patterns over a bounded asynchronous queue."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

_CLOSED = object()


async def _consume(queue: asyncio.Queue) -> list[str]:
    received = []
    while (item := await queue.get()) is not _CLOSED:
        received.append(item)
    return received


async def producer_consumer(items: Iterable[str]) -> list[str]:
    """Send ``items`` through a bounded queue from one task to another.

    Returns the items in the order the consumer received them.
    """
    items = list(items)
    queue: asyncio.Queue = asyncio.Queue(maxsize=max(len(items), 1))

    async def produce() -> None:
        try:
            for item in items:
                await queue.put(item)
        finally:
            await queue.put(_CLOSED)

    producer = asyncio.create_task(produce())
    consumer = asyncio.create_task(_consume(queue))
    await producer
    return await consumer


async def fan_in(n_producers: int) -> list[str]:
    """Collect one message from each of ``n_producers`` tasks, sorted."""
    queue: asyncio.Queue = asyncio.Queue(maxsize=max(n_producers, 1))

    async def produce(producer_id: int) -> None:
        await queue.put(f"producer {producer_id}: message")

    async def close_when_done(producers: list[asyncio.Task]) -> None:
        try:
            await asyncio.gather(*producers)
        finally:
            await queue.put(_CLOSED)

    producers = [asyncio.create_task(produce(i)) for i in range(n_producers)]
    closer = asyncio.create_task(close_when_done(producers))
    messages = await _consume(queue)
    await closer
    return sorted(messages)