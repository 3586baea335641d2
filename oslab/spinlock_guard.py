"""A spin lock whose holder is a guard that releases the lock when done."""

from __future__ import annotations

from types import TracebackType
from typing import Generic, TypeVar

from oslab.spinlock import SpinLock as _RawSpinLock

T = TypeVar("T")


class SpinLock(Generic[T]):
    """A spin lock that hands out :class:`SpinGuard` objects."""

    def __init__(self, data: T) -> None:
        self._raw = _RawSpinLock(data)

    def lock(self) -> SpinGuard[T]:
        """Spin until the lock is held and return a guard for it."""
        self._raw.lock()
        return SpinGuard(self)


class SpinGuard(Generic[T]):
    """Holds a :class:`SpinLock`; use as a context manager to release it on exit."""

    def __init__(self, lock: SpinLock[T]) -> None:
        self._lock = lock
        self._held = True

    def _check_held(self) -> None:
        if not self._held:
            raise RuntimeError("guard has already released its lock")

    @property
    def value(self) -> T:
        """The protected data."""
        self._check_held()
        return self._lock._raw.data

    @value.setter
    def value(self, new: T) -> None:
        self._check_held()
        self._lock._raw.data = new

    def release(self) -> None:
        """Release the lock; later calls do nothing."""
        if self._held:
            self._held = False
            self._lock._raw.unlock()

    def __enter__(self) -> SpinGuard[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()