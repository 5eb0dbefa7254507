"""Main application window for Lapdown."""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QStatusBar

from .audio.sounds import SoundManager
from .clock import ClockSource
from .durations import format_time
from .settings import Settings, load_settings
from .timer.controller import TimerController
from .timer.interfaces import DurationProvider, NotificationSink, TitleSink
from .timer.engine import TimerState
from .timer.laps import Lap
from .ui.notifier import FinishNotifier, DEFAULT_VIBRATION_PATTERN
from .ui.styles import build_stylesheet, get_palette
from .ui.timer_widget import TimerWidget
from .ui.title_flash import TitleFlasher

logger = logging.getLogger(__name__)

APP_TITLE = "Lapdown"

STATUS_MESSAGES: dict[TimerState, str] = {
    TimerState.IDLE:     "Set a duration and press Space",
    TimerState.RUNNING:  "Counting down…",
    TimerState.PAUSED:   "Paused",
    TimerState.FINISHED: "Time's up!",
}


class LapdownApp(QMainWindow):
    """Main application window.

    Owns the one ``TimerController`` (and so the engine) for this window
    and wires the finish consumers: sound, attention request, title flash.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        clock: ClockSource | None = None,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.setMinimumSize(420, 560)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()

        # ── engine ────────────────────────────────────────────────────
        self._controller = TimerController(
            self, clock=clock, poll_interval_ms=self._settings.poll_interval_ms,
        )

        # ── collaborators ─────────────────────────────────────────────
        self._sound_manager = SoundManager(parent=self, sounds_dir=sounds_dir)
        self._notifier: NotificationSink = FinishNotifier(
            self._settings, sounds=self._sound_manager, window=self,
        )
        self._title_flasher = TitleFlasher(self, parent=self)
        self._title_sink: TitleSink = self._title_flasher

        # ── central widget ────────────────────────────────────────────
        self.setStyleSheet(build_stylesheet(get_palette()))
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 12, 16, 12)

        self._timer_widget = TimerWidget(
            self._controller, central, presets=self._settings.presets_minutes,
        )
        layout.addWidget(self._timer_widget)
        self._durations: DurationProvider = self._timer_widget

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

        self._build_menu_bar()

        # ── wire signals ──────────────────────────────────────────────
        self._controller.tick.connect(self._refresh_title)
        self._controller.state_changed.connect(self._on_state_changed)
        self._controller.lap_recorded.connect(self._on_lap_recorded)

        # Finish consumers, in the order they should fire.
        self._controller.on_finish(self._play_finish_sound)
        self._controller.on_finish(self._vibrate)
        self._controller.on_finish(self._flash_title)

        self._apply_settings()
        self._controller.reset(self._durations.duration_ms())
        self._on_state_changed(self._controller.state)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def controller(self) -> TimerController:
        return self._controller

    @property
    def timer_widget(self) -> TimerWidget:
        return self._timer_widget

    @property
    def title_flasher(self) -> TitleFlasher:
        return self._title_flasher

    # ══════════════════════════════════════════════════════════════════
    #  MENU
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu = self.menuBar().addMenu("&Lapdown")

        prefs_action = QAction("Settings…", self)
        prefs_action.setShortcut(QKeySequence("Ctrl+,"))
        prefs_action.triggered.connect(self._open_settings)
        menu.addAction(prefs_action)

        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self.close)
        menu.addAction(quit_action)

    # ══════════════════════════════════════════════════════════════════
    #  FINISH CONSUMERS
    # ══════════════════════════════════════════════════════════════════

    def _play_finish_sound(self) -> None:
        self._notifier.play_finish_pattern()

    def _vibrate(self) -> None:
        self._notifier.vibrate(DEFAULT_VIBRATION_PATTERN)

    def _flash_title(self) -> None:
        if self._settings.title_flash_enabled:
            # The running title must be gone before the flasher captures it.
            self.setWindowTitle(APP_TITLE)
            self._title_sink.flash()

    # ══════════════════════════════════════════════════════════════════
    #  TIMER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        self._status_bar.showMessage(STATUS_MESSAGES.get(state, ""))
        self._refresh_title(self._controller.remaining)

    def _on_lap_recorded(self, lap: Lap) -> None:
        self._sound_manager.play("lap")
        self._status_bar.showMessage(
            f"Lap {lap.index}: {format_time(lap.duration_ms)}", 3000,
        )

    def _refresh_title(self, remaining_ms: int) -> None:
        if self._title_flasher.is_active:
            return
        if self._controller.is_running and remaining_ms > 0:
            self.setWindowTitle(f"{format_time(remaining_ms)} · {APP_TITLE}")
        else:
            self.setWindowTitle(APP_TITLE)

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def _open_settings(self) -> None:
        from .ui.settings_dialog import SettingsDialog

        def _preview():
            self._sound_manager.set_volume(self._settings.sound_volume)
            self._sound_manager.play("click")

        dlg = SettingsDialog(
            self._settings, parent=self, sound_preview_callback=_preview,
        )
        dlg.exec()
        self._apply_settings()

    def _apply_settings(self) -> None:
        """Push current Settings into all subsystems."""
        s = self._settings
        self._controller.set_poll_interval(s.poll_interval_ms)
        self._sound_manager.set_volume(s.sound_volume)
        self._sound_manager.set_enabled(s.sound_enabled)
        self._timer_widget.set_presets(s.presets_minutes)
        on_top = bool(self.windowFlags() & Qt.WindowType.WindowStaysOnTopHint)
        if on_top != s.always_on_top:
            self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, s.always_on_top)
            if self.isVisible():
                self.show()  # changing flags hides the window

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD SHORTCUTS
    # ══════════════════════════════════════════════════════════════════

    def _on_space(self) -> None:
        """Start, pause, or resume the timer."""
        if self._timer_widget.inputs_have_focus():
            return
        self._controller.toggle(self._durations.duration_ms())

    def _on_reset_key(self) -> None:
        if self._timer_widget.inputs_have_focus():
            return
        self._controller.reset(self._durations.duration_ms())

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space toggles start/pause, R resets."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        if key == Qt.Key.Key_R and event.modifiers() in (
            Qt.KeyboardModifier.NoModifier, Qt.KeyboardModifier.ShiftModifier,
        ):
            self._on_reset_key()
            event.accept()
            return
        super().keyPressEvent(event)
