"""Timer scheduling for the status sweep.

Two implementations share one small protocol: :class:`AsyncioScheduler`
for the running service and :class:`ManualScheduler`, a virtual clock that
tests and scripted walkthroughs advance explicitly.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Protocol for delayed-callback schedulers. Delays are in milliseconds."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedules callbacks on an asyncio event loop.

    Without an explicit loop, the loop running at scheduling time is used,
    so this must be called from inside a coroutine or loop callback.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay_ms, 0.0) / 1000.0, callback)


class ManualCall:
    """A callback queued on a :class:`ManualScheduler`."""

    def __init__(
        self,
        due: float,
        callback: Callable[[], None],
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self._on_cancel = on_cancel

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()


class ManualScheduler:
    """Deterministic virtual-time scheduler.

    Callbacks fire only from :meth:`advance` or :meth:`run_all`, in due
    order; callbacks due at the same time fire in scheduling order.
    Cancelled calls are dropped from the queue once they make up more than
    half of it, so repeated cancel-and-reschedule cycles stay bounded.
    """

    def __init__(self) -> None:
        self.now: float = 0.0
        self._queue: list[tuple[float, int, ManualCall]] = []
        self._counter = itertools.count()
        self._cancelled = 0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualCall:
        call = ManualCall(self.now + max(delay_ms, 0.0), callback, self._discard)
        heapq.heappush(self._queue, (call.due, next(self._counter), call))
        return call

    @property
    def pending(self) -> int:
        return len(self._queue) - self._cancelled

    @property
    def queued(self) -> int:
        """Entries in the queue, cancelled ones included."""
        return len(self._queue)

    def _discard(self) -> None:
        self._cancelled += 1
        if self._cancelled * 2 > len(self._queue):
            self._queue = [entry for entry in self._queue if not entry[2].cancelled]
            heapq.heapify(self._queue)
            self._cancelled = 0

    def advance(self, ms: float) -> int:
        """Move the clock forward, firing everything that falls due.

        Returns:
            The number of callbacks fired.
        """
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, call = heapq.heappop(self._queue)
            self.now = due
            if call.cancelled:
                self._cancelled -= 1
                continue
            call._on_cancel = None
            call.callback()
            fired += 1
        self.now = target
        return fired

    def run_all(self) -> int:
        """Fire every pending callback, advancing the clock as needed."""
        fired = 0
        while self._queue:
            fired += self.advance(self._queue[0][0] - self.now)
        return fired
