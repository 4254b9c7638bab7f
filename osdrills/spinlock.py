"""A busy-waiting lock with explicit lock and unlock calls."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Cell(Generic[T]):
    """Mutable box giving the lock holder access to the protected data."""

    value: T


class SpinLock(Generic[T]):
    """Protects a value with a flag that waiters spin on until it clears."""

    def __init__(self, data: T) -> None:
        self._locked = False
        self._flag_guard = threading.Lock()
        self._cell: Cell[T] = Cell(data)

    def _try_set_locked(self) -> bool:
        with self._flag_guard:
            if self._locked:
                return False
            self._locked = True
            return True

    def lock(self) -> Cell[T]:
        """Spin until the lock is taken, then return the cell holding the data.

        The caller must call :meth:`unlock` when done with the data.
        """
        while not self._try_set_locked():
            time.sleep(0)
        return self._cell

    def unlock(self) -> None:
        """Release the lock."""
        with self._flag_guard:
            self._locked = False

    def try_lock(self) -> Cell[T] | None:
        """Take the lock if it is free; return the cell, or None if it is busy."""
        return self._cell if self._try_set_locked() else None