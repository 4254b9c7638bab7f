"""A thread-safe unsigned 64-bit counter with atomic read-modify-write operations."""

from __future__ import annotations

import threading

_U64_MAX = (1 << 64) - 1


class CompareExchangeError(Exception):
    """Raised when a compare-and-swap finds a value other than the expected one."""

    def __init__(self, actual: int) -> None:
        super().__init__(f"compare-and-swap failed: current value is {actual}")
        self.actual = actual


def _check_u64(value: int, name: str) -> int:
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"{name} must fit in 64 unsigned bits, got {value}")
    return value


class AtomicCounter:
    """Unsigned 64-bit counter whose operations are atomic across threads.

    Increment and decrement wrap around on overflow, like hardware atomics.
    """

    def __init__(self, init: int = 0) -> None:
        self._value = _check_u64(init, "init")
        self._guard = threading.Lock()

    def increment(self) -> int:
        """Add one and return the value before the increment."""
        with self._guard:
            previous = self._value
            self._value = (previous + 1) & _U64_MAX
        return previous

    def decrement(self) -> int:
        """Subtract one and return the value before the decrement."""
        with self._guard:
            previous = self._value
            self._value = (previous - 1) & _U64_MAX
        return previous

    def get(self) -> int:
        """Return the current value."""
        with self._guard:
            return self._value

    def compare_and_swap(self, expected: int, new_val: int) -> int:
        """Set the value to ``new_val`` if it equals ``expected``.

        Returns the previous value on success; raises
        :class:`CompareExchangeError` carrying the actual value otherwise.
        """
        _check_u64(new_val, "new_val")
        with self._guard:
            actual = self._value
            if actual != expected:
                raise CompareExchangeError(actual)
            self._value = new_val
        return actual

    def fetch_multiply(self, multiplier: int) -> int:
        """Multiply the value in a compare-and-swap loop; return the value before.

        Raises OverflowError if the product does not fit in 64 unsigned bits.
        """
        _check_u64(multiplier, "multiplier")
        while True:
            current = self.get()
            product = current * multiplier
            if product > _U64_MAX:
                raise OverflowError(f"{current} * {multiplier} overflows 64 bits")
            try:
                return self.compare_and_swap(current, product)
            except CompareExchangeError:
                continue

    def __repr__(self) -> str:
        return f"AtomicCounter({self.get()})"