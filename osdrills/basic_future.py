"""Hand-written awaitables that yield to the event loop a fixed number of times."""

from __future__ import annotations

from typing import Generator

_U32_MAX = (1 << 32) - 1


class CountDown:
    """Counts down by one per scheduling round and finishes with ``"liftoff!"``.

    Every time it is resumed with a non-zero count, it decrements the count
    and hands control back to the event loop, asking to be run again.
    """

    def __init__(self, count: int) -> None:
        if not 0 <= count <= _U32_MAX:
            raise ValueError(f"count must fit in 32 unsigned bits, got {count}")
        self.count = count

    def __await__(self) -> Generator[None, None, str]:
        while self.count > 0:
            self.count -= 1
            yield
        return "liftoff!"


class YieldOnce:
    """Gives control back to the event loop once, then completes with None."""

    def __init__(self) -> None:
        self.yielded = False

    def __await__(self) -> Generator[None, None, None]:
        if not self.yielded:
            self.yielded = True
            yield
        return None