"""A basic spin lock with explicit lock and unlock."""

from __future__ import annotations

import threading
import time
from typing import Generic, TypeVar

T = TypeVar("T")


class SpinLock(Generic[T]):
    """A busy-waiting lock protecting ``data``.

    The protected value lives in :attr:`data`; touch it only between
    :meth:`lock` (or a successful :meth:`try_lock`) and :meth:`unlock`.
    """

    def __init__(self, data: T) -> None:
        self.data = data
        self._locked = False
        self._cas_guard = threading.Lock()

    def _try_acquire(self) -> bool:
        with self._cas_guard:
            if self._locked:
                return False
            self._locked = True
            return True

    def lock(self) -> T:
        """Spin until the lock is held, then return the protected data."""
        while not self._try_acquire():
            while self._locked:
                time.sleep(0)
        return self.data

    def unlock(self) -> None:
        """Release the lock."""
        self._locked = False

    def try_lock(self) -> bool:
        """Take the lock if it is free, without spinning; return whether it was taken."""
        return self._try_acquire()