"""A cooperative round-robin scheduler for green threads.

Each green thread runs on its own stack; exactly one of them (or the thread
that called :meth:`Scheduler.run`) executes at any moment, and control moves
only when the running one calls :func:`yield_now` or finishes.
"""

from __future__ import annotations

import enum
import threading
from typing import Callable, Optional


class ThreadState(enum.Enum):
    READY = "ready"
    RUNNING = "running"
    FINISHED = "finished"


class _GreenThread:
    def __init__(self, state: ThreadState, entry: Optional[Callable[[], object]]) -> None:
        self.state = state
        self.entry = entry
        self.turn = threading.Semaphore(0)
        self.started = entry is None


_active: Optional[Scheduler] = None


class Scheduler:
    """Runs spawned entries cooperatively until all of them have finished."""

    def __init__(self) -> None:
        self._threads: list[_GreenThread] = [_GreenThread(ThreadState.RUNNING, None)]
        self._current = 0
        self._error: Optional[BaseException] = None

    def spawn(self, entry: Callable[[], object]) -> None:
        """Register ``entry`` to run as a green thread when first scheduled."""
        self._threads.append(_GreenThread(ThreadState.READY, entry))

    def run(self) -> None:
        """Schedule threads until every spawned thread is finished.

        An exception raised by a green thread stops the run and is re-raised here.
        """
        global _active
        _active = self
        try:
            while not all(t.state is ThreadState.FINISHED for t in self._threads[1:]):
                self._schedule_next()
                if self._error is not None:
                    error, self._error = self._error, None
                    raise error
        finally:
            _active = None

    def _schedule_next(self) -> None:
        count = len(self._threads)
        start = self._current
        nxt = (start + 1) % count
        while nxt != start and self._threads[nxt].state is not ThreadState.READY:
            nxt = (nxt + 1) % count
        if nxt == start:
            return

        current = self._threads[start]
        target = self._threads[nxt]
        if current.state is not ThreadState.FINISHED:
            current.state = ThreadState.READY
        target.state = ThreadState.RUNNING
        self._current = nxt

        if not target.started:
            target.started = True
            threading.Thread(target=self._wrapper, args=(target,), daemon=True).start()
        target.turn.release()

        if current.state is not ThreadState.FINISHED:
            current.turn.acquire()

    def _wrapper(self, thread: _GreenThread) -> None:
        thread.turn.acquire()
        entry, thread.entry = thread.entry, None
        try:
            if entry is not None:
                entry()
        except BaseException as error:  # handed back to the caller of run()
            self._error = error
        thread.state = ThreadState.FINISHED
        self._schedule_next()


def yield_now() -> None:
    """Give up the processor to the next ready green thread, if a scheduler runs."""
    if _active is not None:
        _active._schedule_next()