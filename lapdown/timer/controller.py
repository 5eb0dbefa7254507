"""Qt driver for the timer engine.

``TimerEngine`` is plain Python and never schedules anything.  The
controller owns one engine plus the ``QTimer`` that polls it, and turns
engine transitions into Qt signals the widgets can connect to.

Signals
-------
tick(remaining_ms: int)
    Emitted after every poll and after every control action.
state_changed(new_state: TimerState)
    Emitted on every state transition.
lap_recorded(lap: Lap)
    Emitted after a lap is appended.
laps_cleared()
    Emitted when the lap list is emptied (clear or reset).
finished()
    Emitted once per run, when the countdown reaches zero.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..clock import ClockSource
from .engine import TimerEngine, TimerState
from .finish import FinishCallback
from .laps import Lap

logger = logging.getLogger(__name__)


DEFAULT_POLL_INTERVAL_MS = 200
MIN_POLL_INTERVAL_MS = 50
MAX_POLL_INTERVAL_MS = 250   # coarser polls make the display visibly lag


class TimerController(QObject):

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    lap_recorded = pyqtSignal(object)
    laps_cleared = pyqtSignal()
    finished = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: ClockSource | None = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._engine = TimerEngine(clock=clock)
        # Registered first so the UI sees ``finished`` before other consumers.
        self._engine.on_finish(self.finished.emit)
        self._engine.on_state_change(self.state_changed.emit)

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(self._clamp_interval(poll_interval_ms))
        self._qt_timer.timeout.connect(self.poll)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def state(self) -> TimerState:
        return self._engine.state

    @property
    def is_running(self) -> bool:
        return self._engine.is_running

    @property
    def remaining(self) -> int:
        """Milliseconds left on the clock."""
        return self._engine.current_remaining()

    @property
    def laps(self) -> tuple[Lap, ...]:
        return self._engine.laps

    @property
    def is_polling(self) -> bool:
        return self._qt_timer.isActive()

    @property
    def poll_interval_ms(self) -> int:
        return self._qt_timer.interval()

    def set_poll_interval(self, ms: int) -> None:
        """Change the poll period (clamped to 50-250 ms)."""
        self._qt_timer.setInterval(self._clamp_interval(ms))

    def on_finish(self, callback: FinishCallback) -> FinishCallback:
        """Register a finish consumer.  Failures are logged, never raised."""
        return self._engine.on_finish(callback)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, requested_ms: int | None = None) -> bool:
        if not self._engine.start(requested_ms):
            return False
        self._qt_timer.start()
        self.tick.emit(self._engine.current_remaining())
        return True

    def pause(self) -> bool:
        if not self._engine.pause():
            return False
        self._qt_timer.stop()
        self.tick.emit(self._engine.current_remaining())
        return True

    def toggle(self, requested_ms: int | None = None) -> bool:
        """Pause when running, otherwise start/resume."""
        if self._engine.is_running:
            return self.pause()
        return self.start(requested_ms)

    def reset(self, configured_ms: int) -> None:
        self._qt_timer.stop()
        self._engine.reset(configured_ms)
        self.laps_cleared.emit()
        self.tick.emit(self._engine.current_remaining())

    def record_lap(self) -> Lap | None:
        """Record a lap, or return None when not running.

        UI buttons and shortcuts go through here, so a stray click while
        paused is harmless.  Code that wants the error should call
        ``engine.record_lap()`` directly.
        """
        if not self._engine.is_running:
            return None
        lap = self._engine.record_lap()
        self.lap_recorded.emit(lap)
        return lap

    def clear_laps(self) -> None:
        self._engine.clear_laps()
        self.laps_cleared.emit()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def poll(self) -> None:
        """One poll of the engine.  Connected to the QTimer."""
        self._engine.tick()
        if self._engine.state != TimerState.RUNNING:
            self._qt_timer.stop()
        self.tick.emit(self._engine.current_remaining())

    @staticmethod
    def _clamp_interval(ms: int) -> int:
        return max(MIN_POLL_INTERVAL_MS, min(int(ms), MAX_POLL_INTERVAL_MS))
