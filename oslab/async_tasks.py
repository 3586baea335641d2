"""Running many small asynchronous tasks concurrently."""

from __future__ import annotations

import asyncio


async def _square(i: int) -> int:
    return i * i


async def concurrent_squares(n: int) -> list[int]:
    """Square each number in ``range(n)`` in its own task; results in order."""
    tasks = [asyncio.create_task(_square(i)) for i in range(n)]
    return [await task for task in tasks]


async def _sleep_then_return(task_id: int, duration_ms: int) -> int:
    await asyncio.sleep(duration_ms / 1000)
    return task_id


async def parallel_sleep_tasks(n: int, duration_ms: int) -> list[int]:
    """Run ``n`` tasks that each sleep ``duration_ms`` and return their id.

    The tasks sleep concurrently, so the whole call takes about as long as
    one of them. The ids come back sorted.
    """
    if duration_ms < 0:
        raise ValueError(f"duration_ms must not be negative, got {duration_ms}")
    tasks = [asyncio.create_task(_sleep_then_return(i, duration_ms)) for i in range(n)]
    return sorted(await asyncio.gather(*tasks))