"""Clock sources for the timer engine.

Every timestamp is an integer number of milliseconds.  Only differences
between two readings are meaningful, so a monotonic source is used rather
than the wall clock (DST and NTP adjustments cannot bend a countdown).
"""

from __future__ import annotations

import time
from typing import Protocol


class ClockSource(Protocol):
    def now_ms(self) -> int: ...


class SystemClock:
    """Monotonic process clock."""

    def now_ms(self) -> int:
        return time.monotonic_ns() // 1_000_000


class ManualClock:
    """A clock that only moves when told to.

    Used by the test-suite and for deterministic simulations::

        clock = ManualClock()
        engine = TimerEngine(clock=clock)
        engine.start(5000)
        clock.advance(2000)
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def advance(self, ms: int) -> int:
        """Move forward by *ms* and return the new reading."""
        if ms < 0:
            raise ValueError("a monotonic clock cannot go backwards")
        self._now += ms
        return self._now

    def set(self, now_ms: int) -> None:
        # Unchecked, lets tests simulate clock anomalies.
        self._now = now_ms
