"""A spin lock whose holder gets a guard that releases the lock when it is done."""

from __future__ import annotations

from typing import Generic, TypeVar

from osdrills.spinlock import Cell, SpinLock

T = TypeVar("T")


class SpinGuard(Generic[T]):
    """Proof of holding a :class:`GuardedSpinLock`; gives access to its data.

    Use it as a context manager, or call :meth:`release`. The lock is also
    released if the guard is garbage-collected while still held.
    """

    def __init__(self, lock: SpinLock[T], cell: Cell[T]) -> None:
        self._lock = lock
        self._cell = cell
        self._held = True

    @property
    def value(self) -> T:
        if not self._held:
            raise RuntimeError("guard has already been released")
        return self._cell.value

    @value.setter
    def value(self, new_value: T) -> None:
        if not self._held:
            raise RuntimeError("guard has already been released")
        self._cell.value = new_value

    def release(self) -> None:
        """Release the lock; later calls do nothing."""
        if self._held:
            self._held = False
            self._lock.unlock()

    def __enter__(self) -> SpinGuard[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self) -> None:
        self.release()


class GuardedSpinLock(Generic[T]):
    """Spin lock that hands out a :class:`SpinGuard` instead of raw access."""

    def __init__(self, data: T) -> None:
        self._inner: SpinLock[T] = SpinLock(data)

    def lock(self) -> SpinGuard[T]:
        """Spin until the lock is taken and return a guard holding it."""
        cell = self._inner.lock()
        return SpinGuard(self._inner, cell)