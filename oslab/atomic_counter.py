"""A thread-safe 64-bit unsigned counter with compare-and-swap."""

from __future__ import annotations

import threading

_U64_LIMIT = 1 << 64
_U64_MASK = _U64_LIMIT - 1


class CasFailed(Exception):
    """Raised when a compare-and-swap finds a value other than the expected one."""

    def __init__(self, actual: int) -> None:
        super().__init__(f"compare-and-swap failed: current value is {actual}")
        self.actual = actual


def _check_u64(name: str, value: int) -> int:
    if not 0 <= value < _U64_LIMIT:
        raise ValueError(f"{name} must fit in 64 unsigned bits, got {value}")
    return value


class AtomicCounter:
    """A 64-bit unsigned counter whose operations are atomic across threads.

    Increment and decrement wrap around like hardware atomics do.
    """

    def __init__(self, init: int = 0) -> None:
        self._value = _check_u64("init", init)
        self._guard = threading.Lock()

    def increment(self) -> int:
        """Add one and return the value from before the increment."""
        with self._guard:
            old = self._value
            self._value = (old + 1) & _U64_MASK
            return old

    def decrement(self) -> int:
        """Subtract one and return the value from before the decrement."""
        with self._guard:
            old = self._value
            self._value = (old - 1) & _U64_MASK
            return old

    def get(self) -> int:
        """Return the current value."""
        return self._value

    def compare_and_swap(self, expected: int, new_val: int) -> int:
        """Set the value to ``new_val`` if it equals ``expected``.

        Returns ``expected`` on success; raises :class:`CasFailed` carrying
        the actual value otherwise.
        """
        _check_u64("new_val", new_val)
        with self._guard:
            actual = self._value
            if actual != expected:
                raise CasFailed(actual)
            self._value = new_val
            return actual

    def fetch_multiply(self, multiplier: int) -> int:
        """Multiply the value atomically and return the value before it.

        Raises :class:`OverflowError` if the product does not fit in 64 bits.
        """
        while True:
            current = self.get()
            product = current * multiplier
            if not 0 <= product < _U64_LIMIT:
                raise OverflowError(f"{current} * {multiplier} overflows 64 bits")
            try:
                return self.compare_and_swap(current, product)
            except CasFailed:
                continue