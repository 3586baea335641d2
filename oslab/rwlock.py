"""A writer-priority read-write lock.

Many readers may hold the lock at once; a writer holds it alone. Once a
writer is waiting, no new readers are admitted until that writer has run.
"""

from __future__ import annotations

import threading
from types import TracebackType
from typing import Generic, TypeVar

T = TypeVar("T")

MAX_READERS = (1 << 30) - 1


class RwLock(Generic[T]):
    """Writer-priority read-write lock protecting a value."""

    def __init__(self, data: T) -> None:
        self._data = data
        self._cond = threading.Condition()
        self._readers = 0
        self._writer_holding = False
        self._writers_waiting = 0

    def _reader_may_enter(self) -> bool:
        return (
            not self._writer_holding
            and self._writers_waiting == 0
            and self._readers < MAX_READERS
        )

    def _writer_may_enter(self) -> bool:
        return not self._writer_holding and self._readers == 0

    def read(self) -> ReadGuard[T]:
        """Block until no writer holds or waits, then return a read guard."""
        with self._cond:
            self._cond.wait_for(self._reader_may_enter)
            self._readers += 1
        return ReadGuard(self)

    def write(self) -> WriteGuard[T]:
        """Block until there are no readers and no other writer, then return a write guard."""
        with self._cond:
            self._writers_waiting += 1
            try:
                self._cond.wait_for(self._writer_may_enter)
            finally:
                self._writers_waiting -= 1
            self._writer_holding = True
        return WriteGuard(self)

    def _release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            self._cond.notify_all()

    def _release_write(self) -> None:
        with self._cond:
            self._writer_holding = False
            self._cond.notify_all()


def _require_held(held: bool) -> None:
    if not held:
        raise RuntimeError("guard has already released its lock")


class ReadGuard(Generic[T]):
    """Shared access to the protected value; releases the read lock on exit."""

    def __init__(self, lock: RwLock[T]) -> None:
        self._lock = lock
        self._held = True

    @property
    def value(self) -> T:
        """The protected data (read-only through this guard)."""
        _require_held(self._held)
        return self._lock._data

    def release(self) -> None:
        """Release the read lock; later calls do nothing."""
        if self._held:
            self._held = False
            self._lock._release_read()

    def __enter__(self) -> ReadGuard[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


class WriteGuard(Generic[T]):
    """Exclusive access to the protected value; releases the write lock on exit."""

    def __init__(self, lock: RwLock[T]) -> None:
        self._lock = lock
        self._held = True

    @property
    def value(self) -> T:
        """The protected data."""
        _require_held(self._held)
        return self._lock._data

    @value.setter
    def value(self, new: T) -> None:
        _require_held(self._held)
        self._lock._data = new

    def release(self) -> None:
        """Release the write lock; later calls do nothing."""
        if self._held:
            self._held = False
            self._lock._release_write()

    def __enter__(self) -> WriteGuard[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()