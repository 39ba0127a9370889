"""Single-threaded timer queue for delayed and recurring game callbacks.

Callbacks are never run on their own thread. The host calls
:meth:`Scheduler.run_due` from its event loop and every callback whose due
time has passed runs synchronously, in due-time order, on that thread.
Time comes from an injectable monotonic clock so tests and replays can
drive it with :class:`ManualClock`.
"""
from __future__ import annotations

import heapq
import time
from dataclasses import dataclass, field
from typing import Callable, List

Clock = Callable[[], float]


class ManualClock:
    """Monotonic clock advanced explicitly by the caller."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("A monotonic clock cannot move backwards.")
        self._now += seconds
        return self._now


@dataclass(order=True)
class ScheduledCall:
    """Handle for a pending callback; ordering is (due_at, sequence)."""

    due_at: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    interval: float | None = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)

    @property
    def recurring(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Min-heap of scheduled calls keyed by due time."""

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._queue: List[ScheduledCall] = []
        self._sequence = 0

    @property
    def now(self) -> float:
        return self._clock()

    @property
    def pending(self) -> int:
        return sum(1 for call in self._queue if not call.cancelled)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run ``callback`` once, ``delay`` seconds from now."""
        return self._push(self.now + max(0.0, delay), callback, interval=None)

    def call_every(self, interval: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run ``callback`` every ``interval`` seconds until cancelled."""
        if interval <= 0:
            raise ValueError("Recurring interval must be positive.")
        return self._push(self.now + interval, callback, interval=interval)

    def cancel_all(self) -> None:
        for call in self._queue:
            call.cancelled = True
        self._queue.clear()

    def run_due(self) -> int:
        """Run every callback that is due; returns how many ran.

        A recurring call that fell several intervals behind runs once per
        missed interval so time-based decay stays exact.
        """
        ran = 0
        now = self.now
        while self._queue and self._queue[0].due_at <= now:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            if call.interval is not None:
                call.due_at += call.interval
                call.sequence = self._next_sequence()
                heapq.heappush(self._queue, call)
            call.callback()
            ran += 1
        return ran

    def _push(self, due_at: float, callback: Callable[[], None], *, interval: float | None) -> ScheduledCall:
        call = ScheduledCall(due_at=due_at, sequence=self._next_sequence(), callback=callback, interval=interval)
        heapq.heappush(self._queue, call)
        return call

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence
