"""Clock and one-shot timer primitives the ticker runs on.

The ticker never touches a global event loop. It is handed a Scheduler that
owns both the monotonic clock and the ability to fire a callback later, so
the Qt host and the tests can each supply their own.
"""

import heapq
import itertools
from collections.abc import Callable


class TimerHandle:
    """A single pending fire. Cancelling releases it for good."""

    def __init__(self, callback: Callable[[], None]):
        self._callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        self._callback = None

    def _fire(self) -> None:
        callback = self._callback
        self._callback = None
        if callback is not None and not self.cancelled:
            callback()


class Scheduler:
    """Monotonic milliseconds plus one-shot callbacks."""

    def now(self) -> int:
        raise NotImplementedError

    def call_later(self, delay_millis: int, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class SimulatedScheduler(Scheduler):
    """Deterministic scheduler driven by hand.

    Time only moves when advance() is called. Due callbacks fire in due-time
    order (ties in scheduling order), and the clock reads each callback's due
    time while it runs, the same way a real loop would wake up for it.
    """

    def __init__(self, start_millis: int = 0):
        self._now = int(start_millis)
        self._queue = []
        self._seq = itertools.count()

    def now(self) -> int:
        return self._now

    def call_later(self, delay_millis, callback):
        handle = TimerHandle(callback)
        due = self._now + max(0, int(delay_millis))
        heapq.heappush(self._queue, (due, next(self._seq), handle))
        return handle

    def pending_count(self) -> int:
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def next_due(self):
        self._drop_cancelled()
        return self._queue[0][0] if self._queue else None

    def advance(self, millis: int) -> int:
        """Move the clock forward, firing everything that comes due. Returns the number of fires."""
        target = self._now + max(0, int(millis))
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0][0] > target:
                break
            due, _, handle = heapq.heappop(self._queue)
            self._now = due
            handle._fire()
            fired += 1
        self._now = target
        return fired

    def advance_to(self, millis: int) -> int:
        return self.advance(int(millis) - self._now)

    def _drop_cancelled(self):
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
