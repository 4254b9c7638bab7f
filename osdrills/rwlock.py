"""A writer-priority read-write lock built on a single state word."""

from __future__ import annotations

import threading
import time
from typing import Generic, TypeVar

T = TypeVar("T")

# Low bits count readers; two high bits flag a holding and a waiting writer.
_READER_MASK = (1 << 30) - 1
_WRITER_HOLDING = 1 << 30
_WRITER_WAITING = 1 << 31


class _Slot(Generic[T]):
    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value


class RwLock(Generic[T]):
    """Many readers or one writer at a time; a waiting writer blocks new readers."""

    def __init__(self, data: T) -> None:
        self._state = 0
        self._state_guard = threading.Lock()
        self._slot: _Slot[T] = _Slot(data)

    def _load(self) -> int:
        with self._state_guard:
            return self._state

    def _compare_exchange(self, current: int, desired: int) -> bool:
        with self._state_guard:
            if self._state != current:
                return False
            self._state = desired
            return True

    def _fetch_or(self, bits: int) -> None:
        with self._state_guard:
            self._state |= bits

    def _release_reader(self) -> None:
        with self._state_guard:
            self._state -= 1

    def _release_writer(self) -> None:
        with self._state_guard:
            self._state &= ~(_WRITER_HOLDING | _WRITER_WAITING)

    def read(self) -> RwLockReadGuard[T]:
        """Spin until no writer holds or waits for the lock, then take a read guard."""
        while True:
            current = self._load()
            if current & (_WRITER_HOLDING | _WRITER_WAITING):
                time.sleep(0)
                continue
            if current & _READER_MASK == _READER_MASK:
                time.sleep(0)
                continue
            if self._compare_exchange(current, current + 1):
                return RwLockReadGuard(self)

    def write(self) -> RwLockWriteGuard[T]:
        """Announce a waiting writer, then spin until the lock is free and take it."""
        self._fetch_or(_WRITER_WAITING)
        while True:
            current = self._load()
            if current & (_READER_MASK | _WRITER_HOLDING):
                time.sleep(0)
                continue
            desired = (current & ~_WRITER_WAITING) | _WRITER_HOLDING
            if self._compare_exchange(current, desired):
                return RwLockWriteGuard(self)


class _Guard(Generic[T]):
    def __init__(self, lock: RwLock[T]) -> None:
        self._lock = lock
        self._held = True

    def _check_held(self) -> None:
        if not self._held:
            raise RuntimeError("guard has already been released")

    def _unlock(self) -> None:
        raise NotImplementedError

    def release(self) -> None:
        """Release the lock; later calls do nothing."""
        if self._held:
            self._held = False
            self._unlock()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self) -> None:
        self.release()


class RwLockReadGuard(_Guard[T]):
    """Shared access to the data of an :class:`RwLock`."""

    @property
    def value(self) -> T:
        self._check_held()
        return self._lock._slot.value

    def _unlock(self) -> None:
        self._lock._release_reader()

    def release(self) -> None:
        """Give up the read lock; later calls do nothing."""
        super().release()

    def __enter__(self) -> RwLockReadGuard[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class RwLockWriteGuard(_Guard[T]):
    """Exclusive access to the data of an :class:`RwLock`."""

    @property
    def value(self) -> T:
        self._check_held()
        return self._lock._slot.value

    @value.setter
    def value(self, new_value: T) -> None:
        self._check_held()
        self._lock._slot.value = new_value

    def _unlock(self) -> None:
        self._lock._release_writer()

    def release(self) -> None:
        """Give up the write lock; later calls do nothing."""
        super().release()

    def __enter__(self) -> RwLockWriteGuard[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()