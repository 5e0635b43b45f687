"""Repeating timers driving reveal runs.

A scheduler hands out :class:`TimerHandle` objects for repeating callbacks.
Handles are owned by the engine that requested them and cancelling one is
always safe, including from inside its own callback and more than once.
"""

import asyncio
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from modemizr.shared.clock import ManualClock

TimerCallback = Callable[[], None]

_timer_ids = itertools.count(1)


class TimerHandle:
    """A repeating timer registration."""

    def __init__(self, interval_ms: float, callback: TimerCallback) -> None:
        if not interval_ms > 0:
            raise ValueError("Timer interval must be > 0")
        self.timer_id = next(_timer_ids)
        self.interval_ms = float(interval_ms)
        self.callback = callback
        self.cancelled = False

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"TimerHandle(id={self.timer_id}, interval_ms={self.interval_ms:g}, {state})"


class Scheduler(ABC):
    """Provider of repeating timers."""

    @abstractmethod
    def call_repeatedly(self, interval_ms: float, callback: TimerCallback) -> TimerHandle:
        """Invoke ``callback`` every ``interval_ms`` until cancelled."""

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        """Cancel a timer. Unknown, cancelled or ``None`` handles are ignored."""
        if handle is not None:
            handle.cancel()


class _AsyncioTimer(TimerHandle):
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_ms: float,
        callback: TimerCallback
    ) -> None:
        super().__init__(interval_ms, callback)
        self._loop = loop
        self._deadline = loop.time()
        self._pending: Optional[asyncio.TimerHandle] = None
        self._schedule()

    def _schedule(self) -> None:
        # Fixed-rate: the next deadline follows the previous one, never the past
        self._deadline = max(self._deadline + self.interval_ms / 1000.0, self._loop.time())
        self._pending = self._loop.call_at(self._deadline, self._fire)

    def _fire(self) -> None:
        self._pending = None
        if self.cancelled:
            return
        try:
            self.callback()
        finally:
            if not self.cancelled:
                self._schedule()

    def cancel(self) -> None:
        super().cancel()
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


class AsyncioScheduler(Scheduler):
    """Scheduler running timers on an asyncio event loop.

    Without an explicit loop the running loop at the time of the first
    ``call_repeatedly`` is used, so engines must be started from inside it.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_repeatedly(self, interval_ms: float, callback: TimerCallback) -> TimerHandle:
        return _AsyncioTimer(self.loop, interval_ms, callback)


class _ManualTimer(TimerHandle):
    def __init__(self, interval_ms: float, callback: TimerCallback, now_ms: float) -> None:
        super().__init__(interval_ms, callback)
        self.next_due_ms = now_ms + self.interval_ms


class ManualScheduler(Scheduler):
    """Deterministic scheduler whose time only moves through :meth:`advance`.

    Timers fire in due-time order, the clock reading the due time of each
    firing. Useful for tests and for hosts that drive reveals from their own
    frame loop.
    """

    def __init__(self, clock: Optional[ManualClock] = None) -> None:
        self.clock = clock if clock is not None else ManualClock()
        self._timers: List[_ManualTimer] = []

    @property
    def active_timers(self) -> List[TimerHandle]:
        self._timers = [timer for timer in self._timers if timer.active]
        return list(self._timers)

    def call_repeatedly(self, interval_ms: float, callback: TimerCallback) -> TimerHandle:
        timer = _ManualTimer(interval_ms, callback, self.clock.now_ms())
        self._timers.append(timer)
        return timer

    def _next_timer(self, limit_ms: float) -> Optional[_ManualTimer]:
        candidates = [
            timer for timer in self.active_timers if timer.next_due_ms <= limit_ms
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda timer: (timer.next_due_ms, timer.timer_id))

    def advance(self, ms: float) -> int:
        """Move time forward by ``ms``, firing due timers. Returns firings."""
        target = self.clock.now_ms() + ms
        fired = self._run_until(target)
        self.clock.set(target)
        return fired

    def run_until_idle(self, limit_ms: float = 3_600_000.0) -> int:
        """Fire timers until none is active or ``limit_ms`` of time has passed."""
        return self._run_until(self.clock.now_ms() + limit_ms)

    def _run_until(self, limit_ms: float) -> int:
        fired = 0
        timer = self._next_timer(limit_ms)
        while timer is not None:
            self.clock.set(max(timer.next_due_ms, self.clock.now_ms()))
            timer.next_due_ms += timer.interval_ms
            timer.callback()
            fired += 1
            timer = self._next_timer(limit_ms)
        return fired
