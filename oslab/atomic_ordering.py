"""Publishing data between threads: a one-shot flag channel and a once-cell."""

from __future__ import annotations

import threading

_U32_LIMIT = 1 << 32


def _check_u32(value: int) -> int:
    if not 0 <= value < _U32_LIMIT:
        raise ValueError(f"value must fit in 32 unsigned bits, got {value}")
    return value


class FlagChannel:
    """Passes one 32-bit value from a producer to a consumer.

    The producer stores the data and then raises the ready flag; the
    consumer waits for the flag before reading the data.
    """

    def __init__(self) -> None:
        self._data = 0
        self._ready = threading.Event()

    def produce(self, value: int) -> None:
        """Store ``value`` and mark the channel ready."""
        self._data = _check_u32(value)
        self._ready.set()

    def consume(self) -> int:
        """Wait until the channel is ready, then return the stored value."""
        self._ready.wait()
        return self._data

    def reset(self) -> None:
        """Clear the ready flag and the stored value."""
        self._ready.clear()
        self._data = 0


class OnceCell:
    """A cell holding a 32-bit value that can be set exactly once."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._initialized = False
        self._value = 0

    def init(self, val: int) -> bool:
        """Store ``val`` if the cell is empty; return whether this call set it."""
        _check_u32(val)
        with self._guard:
            if self._initialized:
                return False
            self._value = val
            self._initialized = True
            return True

    def get(self) -> int | None:
        """Return the stored value, or ``None`` if the cell is still empty."""
        with self._guard:
            return self._value if self._initialized else None