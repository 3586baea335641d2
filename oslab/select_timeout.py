"""Racing awaitables against each other and against a deadline."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], timeout_ms: int) -> T | None:
    """Return the result of ``awaitable``, or ``None`` if it takes longer than ``timeout_ms``.

    On timeout the awaitable is cancelled.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout_ms / 1000)
    except asyncio.TimeoutError:
        return None


async def race(first: Awaitable[T], second: Awaitable[T]) -> T:
    """Return the result of whichever awaitable finishes first; cancel the other.

    If both finish in the same step, ``first`` wins.
    """
    first_task = asyncio.ensure_future(first)
    second_task = asyncio.ensure_future(second)
    tasks = (first_task, second_task)
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        for task in tasks:
            if task.cancelled() or not task.done():
                with contextlib.suppress(asyncio.CancelledError):
                    await task
    winner = first_task if first_task in done else second_task
    return winner.result()