"""A cooperative round-robin scheduler for green threads.

Each green thread runs on its own stack, but only one runs at a time: a
thread gives up the processor by calling :func:`yield_now`, and the
scheduler switches to the next ready thread in round-robin order.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import Callable

_active: Scheduler | None = None


class ThreadState(enum.Enum):
    """Lifecycle state of a green thread."""

    READY = "ready"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass
class _GreenThread:
    state: ThreadState
    entry: Callable[[], None] | None = None
    carrier: threading.Thread | None = None
    wakeup: threading.Semaphore = field(default_factory=lambda: threading.Semaphore(0))


class Scheduler:
    """Runs spawned green threads until all of them have finished."""

    def __init__(self) -> None:
        self._threads: list[_GreenThread] = [_GreenThread(ThreadState.RUNNING)]
        self._current = 0
        self._errors: list[BaseException] = []

    @property
    def states(self) -> tuple[ThreadState, ...]:
        """States of the spawned green threads, in spawn order."""
        return tuple(t.state for t in self._threads[1:])

    def spawn(self, entry: Callable[[], None]) -> None:
        """Register a green thread that runs ``entry`` when first scheduled."""
        self._threads.append(_GreenThread(ThreadState.READY, entry=entry))

    def run(self) -> None:
        """Schedule threads until every spawned thread is finished.

        If a thread's entry raised, the first such exception is re-raised
        once all threads have finished.
        """
        global _active
        self._threads[0].state = ThreadState.RUNNING
        _active = self
        try:
            while not all(t.state is ThreadState.FINISHED for t in self._threads[1:]):
                self._schedule_next()
        finally:
            _active = None
        for thread in self._threads[1:]:
            if thread.carrier is not None:
                thread.carrier.join()
        if self._errors:
            raise self._errors[0]

    def _schedule_next(self) -> None:
        old = self._current
        count = len(self._threads)
        order = [*range(old + 1, count), *range(0, old + 1)]
        nxt = next((i for i in order if self._threads[i].state is ThreadState.READY), None)
        if nxt is None:
            return

        old_thread = self._threads[old]
        new_thread = self._threads[nxt]
        finished = old_thread.state is ThreadState.FINISHED
        if not finished:
            old_thread.state = ThreadState.READY
        new_thread.state = ThreadState.RUNNING
        self._current = nxt

        if new_thread.entry is not None:
            entry, new_thread.entry = new_thread.entry, None
            new_thread.carrier = threading.Thread(
                target=self._wrapper, args=(entry,), daemon=True
            )
            new_thread.carrier.start()
        else:
            new_thread.wakeup.release()

        if not finished:
            old_thread.wakeup.acquire()

    def _wrapper(self, entry: Callable[[], None]) -> None:
        try:
            entry()
        except BaseException as error:
            self._errors.append(error)
        self._threads[self._current].state = ThreadState.FINISHED
        self._schedule_next()


def yield_now() -> None:
    """Give up the processor to the next ready green thread.

    Does nothing when no scheduler is running.
    """
    if _active is not None:
        _active._schedule_next()