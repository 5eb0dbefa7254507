"""Countdown state machine for Lapdown.

States
------
IDLE       Not running.  Holds the configured duration (or 0).
RUNNING    Counting down towards an absolute deadline.
PAUSED     Frozen.  Remembers the leftover time.
FINISHED   Reached zero.  Behaves like IDLE with 0 remaining.

Transitions
-----------
IDLE | FINISHED → RUNNING        (start, needs a non-zero duration)
RUNNING → PAUSED                 (pause)
PAUSED → RUNNING                 (start, resumes leftover time)
RUNNING → FINISHED               (tick once the deadline has passed)
Any → IDLE                       (reset)

Remaining time while RUNNING is never decremented per poll.  It is always
``deadline - now`` read from the clock, so an irregular or late poll cannot
accumulate drift.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable

from ..clock import ClockSource, SystemClock
from .errors import InvalidDurationError
from .finish import FinishCallback, FinishSignal
from .laps import Lap, LapTracker

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


StateCallback = Callable[[TimerState], None]


# ── helpers ───────────────────────────────────────────────────────────────


def coerce_duration(value: object) -> int:
    """Validate a millisecond duration and return it as ``int``.

    Integral floats are accepted (``1500.0``); ``bool`` is not.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDurationError(
            f"duration must be a number of milliseconds, got {value!r}"
        )
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidDurationError(f"duration must be finite, got {value!r}")
        if not value.is_integer():
            raise InvalidDurationError(
                f"duration must be a whole number of milliseconds, got {value!r}"
            )
        value = int(value)
    if value < 0:
        raise InvalidDurationError(f"duration must be >= 0, got {value!r}")
    return value


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine:
    """Deadline-anchored countdown with laps and a one-shot finish event.

    The engine does no scheduling of its own.  Something outside (the Qt
    ``TimerController`` in the app, a loop in tests) calls ``tick()``
    periodically; every other operation is synchronous.

    Documented no-ops (``start`` with nothing to count, ``start`` while
    running, ``pause`` while not running) return ``False`` instead of
    raising, so callers can tell them apart from a real transition.
    """

    def __init__(self, *, clock: ClockSource | None = None) -> None:
        self._clock: ClockSource = clock or SystemClock()

        self._state: TimerState = TimerState.IDLE
        self._remaining: int = 0
        self._deadline: int | None = None

        self._laps = LapTracker(self)
        self._finish = FinishSignal()
        self._state_listeners: list[StateCallback] = []

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def laps(self) -> tuple[Lap, ...]:
        return self._laps.laps

    @property
    def lap_tracker(self) -> LapTracker:
        return self._laps

    @property
    def deadline_ms(self) -> int | None:
        """Absolute clock reading at which a running timer hits zero."""
        return self._deadline if self.is_running else None

    def current_remaining(self) -> int:
        """Milliseconds left.  Pure read, never changes state."""
        if self._state == TimerState.RUNNING:
            return self._remaining_at(self._clock.now_ms())
        return self._remaining

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, requested_ms: int | None = None) -> bool:
        """Start a fresh run or resume a paused one.

        *requested_ms* is only used when there is no time left on the
        clock (IDLE after ``reset(0)``, FINISHED, or paused at zero).
        Returns False, changing nothing, when already running or when there
        is still nothing to count down.
        """
        if requested_ms is not None:
            requested_ms = coerce_duration(requested_ms)

        if self._state == TimerState.RUNNING:
            return False

        fresh_run = self._remaining == 0
        remaining = (requested_ms or 0) if fresh_run else self._remaining
        if remaining == 0:
            logger.debug("start ignored: no duration to count down")
            return False

        now = self._clock.now_ms()
        self._remaining = remaining
        self._deadline = now + remaining
        self._laps.anchor(remaining, rebase=fresh_run)
        self._finish.arm()
        self._set_state(TimerState.RUNNING)
        return True

    def pause(self) -> bool:
        """Freeze the countdown, keeping the leftover time."""
        if self._state != TimerState.RUNNING:
            return False
        self._remaining = self._remaining_at(self._clock.now_ms())
        self._deadline = None
        self._set_state(TimerState.PAUSED)
        return True

    def reset(self, configured_ms: int) -> None:
        """Return to IDLE holding *configured_ms*.  Clears every lap."""
        configured_ms = coerce_duration(configured_ms)
        self._remaining = configured_ms
        self._deadline = None
        self._laps.reset()
        self._set_state(TimerState.IDLE)

    def tick(self) -> int:
        """Poll the clock.  Returns the remaining milliseconds.

        The RUNNING → FINISHED transition happens here, and only here.
        Finish consumers run after the state has already changed.
        """
        if self._state != TimerState.RUNNING:
            return self._remaining

        self._remaining = self._remaining_at(self._clock.now_ms())
        if self._remaining == 0:
            self._deadline = None
            self._set_state(TimerState.FINISHED)
            logger.info("countdown finished")
            self._finish.fire()
        return self._remaining

    # ── laps ──────────────────────────────────────────────────────────

    def record_lap(self) -> Lap:
        """Record a lap.  Raises ``PreconditionError`` unless RUNNING."""
        lap = self._laps.record()
        logger.debug(
            "lap %d: %d ms (%d ms left)",
            lap.index, lap.duration_ms, lap.remaining_at_lap_ms,
        )
        return lap

    def clear_laps(self) -> None:
        self._laps.clear()

    # ── finish ────────────────────────────────────────────────────────

    def on_finish(self, callback: FinishCallback) -> FinishCallback:
        """Register a finish consumer (called in registration order)."""
        return self._finish.connect(callback)

    def on_state_change(self, callback: StateCallback) -> StateCallback:
        """Register a listener called with the new state on every transition.

        Listeners run synchronously inside the transition, so a finish
        consumer that restarts the engine is reported as FINISHED then
        RUNNING.
        """
        self._state_listeners.append(callback)
        return callback

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _remaining_at(self, now: int) -> int:
        if self._deadline is None:
            return self._remaining
        # A clock stepping backwards must not hand time back.
        return min(self._remaining, max(0, self._deadline - now))

    def _set_state(self, new_state: TimerState) -> None:
        if new_state == self._state:
            return
        logger.debug("%s -> %s", self._state.value, new_state.value)
        self._state = new_state
        for listener in list(self._state_listeners):
            listener(new_state)
