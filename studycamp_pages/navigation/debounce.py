"""Timer scheduling and debouncing with an injectable clock.

The tracker never touches wall-clock time directly. It asks a
:class:`Scheduler` for delayed callbacks; an ``asyncio`` event loop already
satisfies the protocol through ``loop.call_later``, and :class:`ManualScheduler`
provides a virtual clock for headless previews and tests.

Example
-------
>>> calls = []
>>> scheduler = ManualScheduler()
>>> debouncer = Debouncer(0.1, lambda: calls.append("fired"), scheduler)
>>> debouncer.trigger()
>>> scheduler.advance(0.05)
>>> debouncer.trigger()
>>> scheduler.advance(0.08)
>>> calls
[]
>>> scheduler.advance(0.05)
>>> calls
['fired']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import heapq
import itertools
import typing as typ


class TimerHandle(typ.Protocol):
    """Handle returned by :meth:`Scheduler.call_later`."""

    def cancel(self) -> None:
        """Prevent the callback from running if it has not run yet."""


class Scheduler(typ.Protocol):
    """Anything able to run a callback after a delay in seconds."""

    def call_later(
        self, delay: float, callback: cabc.Callable[[], object], /
    ) -> TimerHandle:
        """Schedule ``callback`` to run once after ``delay`` seconds."""
        ...


@dc.dataclass(slots=True)
class _ManualTimer:
    due: float
    callback: cabc.Callable[[], object]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler driven by :meth:`advance`.

    Callbacks run in due-time order (ties in scheduling order) when the
    virtual clock passes their due time. Callbacks may schedule further
    timers; those run during the same ``advance`` call if they fall due.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self._queue: list[tuple[float, int, _ManualTimer]] = []
        self._sequence = itertools.count()

    def call_later(
        self, delay: float, callback: cabc.Callable[[], object], /
    ) -> _ManualTimer:
        """Schedule ``callback`` at ``now + delay`` on the virtual clock."""
        timer = _ManualTimer(due=self.now + max(delay, 0.0), callback=callback)
        heapq.heappush(self._queue, (timer.due, next(self._sequence), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of scheduled, non-cancelled timers."""
        return sum(1 for _due, _seq, timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every timer that falls due."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _seq, timer = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if not timer.cancelled:
                timer.callback()
        self.now = target


class Debouncer:
    """Coalesce bursts of triggers into one call after a quiet period."""

    def __init__(
        self,
        delay: float,
        callback: cabc.Callable[[], object],
        scheduler: Scheduler,
    ) -> None:
        self.delay = delay
        self._callback = callback
        self._scheduler = scheduler
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """Whether a call is currently scheduled."""
        return self._handle is not None

    def trigger(self) -> None:
        """Restart the quiet period, cancelling any scheduled call."""
        self.cancel()
        self._handle = self._scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the scheduled call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()


__all__ = ["Debouncer", "ManualScheduler", "Scheduler", "TimerHandle"]
