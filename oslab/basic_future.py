"""Hand-written awaitables that show how an event loop drives a computation.

Each time one of these objects suspends, it hands control back to the event
loop, which schedules it again right away. That is the equivalent of a
future returning "pending" after waking its own waker.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any


class CountDown:
    """Counts down by one on every resumption and finishes with ``"liftoff!"``."""

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        self.count = count

    def __await__(self) -> Generator[Any, None, str]:
        while self.count > 0:
            self.count -= 1
            yield
        return "liftoff!"


class YieldOnce:
    """Suspends exactly once, then completes with ``None``."""

    def __init__(self) -> None:
        self.yielded = False

    def __await__(self) -> Generator[Any, None, None]:
        if not self.yielded:
            self.yielded = True
            yield