"""Millisecond clocks for elapsed-time accounting."""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of the current time in milliseconds."""

    @abstractmethod
    def now_ms(self) -> float:
        """Current time in milliseconds."""


class SystemClock(Clock):
    """Monotonic wall clock."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


class ManualClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)

    def now_ms(self) -> float:
        return self._now

    def advance(self, ms: float) -> float:
        """Move the clock forward and return the new time."""
        if ms < 0:
            raise ValueError("Cannot move a clock backwards")
        self._now += ms
        return self._now

    def set(self, now_ms: float) -> None:
        if now_ms < self._now:
            raise ValueError("Cannot move a clock backwards")
        self._now = float(now_ms)
