"""Main countdown widget.

Layout (top → bottom):
    - Duration inputs (hours / minutes / seconds)
    - Preset buttons
    - State label + big time display
    - Control row: Reset · Start/Pause · Lap
    - Lap list with a Clear button
"""

from __future__ import annotations

from typing import Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QSpinBox, QFrame, QListWidget,
)

from ..durations import (
    DEFAULT_PRESETS_MINUTES, MAX_HOURS, MAX_MINUTES, MAX_SECONDS,
    format_time, parse_hms, preset_to_hms,
)
from ..timer.controller import TimerController
from ..timer.engine import TimerState
from ..timer.laps import Lap
from .styles import state_color


STATE_LABELS: dict[TimerState, str] = {
    TimerState.IDLE:     "READY",
    TimerState.RUNNING:  "RUNNING",
    TimerState.PAUSED:   "PAUSED",
    TimerState.FINISHED: "TIME'S UP",
}


def format_lap(lap: Lap) -> str:
    return (
        f"Lap {lap.index:<3d} {format_time(lap.duration_ms)}"
        f"  (left {format_time(lap.remaining_at_lap_ms)})"
    )


class TimerWidget(QWidget):
    """Countdown card.  Acts as the duration provider and display sink."""

    def __init__(
        self,
        controller: TimerController,
        parent: QWidget | None = None,
        *,
        presets: Sequence[int] = DEFAULT_PRESETS_MINUTES,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._presets = tuple(presets)
        self._build_ui()
        self._connect_signals()
        self._on_state_changed(controller.state)

    # ── collaborator call shapes ──────────────────────────────────────────

    def duration_ms(self) -> int:
        return parse_hms(
            self._hours.value(), self._minutes.value(), self._seconds.value(),
        )

    def show_time(self, text: str) -> None:
        self._time_label.setText(text)

    def set_duration_fields(self, hours: int, minutes: int, seconds: int) -> None:
        """Fill the three inputs at once (one change notification)."""
        for spin, value in (
            (self._hours, hours), (self._minutes, minutes), (self._seconds, seconds),
        ):
            spin.blockSignals(True)
            spin.setValue(value)
            spin.blockSignals(False)
        self._on_inputs_changed()

    def set_presets(self, presets: Sequence[int]) -> None:
        """Replace the preset buttons."""
        presets = tuple(presets)
        if presets == self._presets:
            return
        for btn in self._preset_buttons:
            self._preset_row.removeWidget(btn)
            btn.deleteLater()
        self._preset_buttons.clear()
        self._presets = presets
        self._fill_presets(self._card)

    @property
    def presets(self) -> tuple[int, ...]:
        return self._presets

    def inputs_have_focus(self) -> bool:
        return any(
            spin.hasFocus() for spin in (self._hours, self._minutes, self._seconds)
        )

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        self._card = card
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(12)

        # ── duration inputs ──────────────────────────────────────────
        input_row = QHBoxLayout()
        input_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._hours = self._make_spin(card, MAX_HOURS, " h")
        self._minutes = self._make_spin(card, MAX_MINUTES, " m")
        self._seconds = self._make_spin(card, MAX_SECONDS, " s")
        for spin in (self._hours, self._minutes, self._seconds):
            input_row.addWidget(spin)
        layout.addLayout(input_row)

        # ── presets ──────────────────────────────────────────────────
        self._preset_row = QHBoxLayout()
        self._preset_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._preset_buttons: list[QPushButton] = []
        self._fill_presets(card)
        layout.addLayout(self._preset_row)

        # ── display ──────────────────────────────────────────────────
        self._state_label = QLabel("READY", card)
        self._state_label.setObjectName("stateLabel")
        self._state_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._state_label)

        self._time_label = QLabel("00:00", card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("dangerButton")

        self._start_pause_btn = QPushButton("Start", card)
        self._start_pause_btn.setObjectName("primaryButton")

        self._lap_btn = QPushButton("Lap", card)

        btn_row.addWidget(self._reset_btn)
        btn_row.addWidget(self._start_pause_btn)
        btn_row.addWidget(self._lap_btn)
        layout.addLayout(btn_row)

        # ── laps ─────────────────────────────────────────────────────
        lap_header = QHBoxLayout()
        lap_header.addWidget(QLabel("Laps", card))
        lap_header.addStretch()
        self._clear_laps_btn = QPushButton("Clear", card)
        lap_header.addWidget(self._clear_laps_btn)
        layout.addLayout(lap_header)

        self._lap_list = QListWidget(card)
        layout.addWidget(self._lap_list)

    def _fill_presets(self, parent: QWidget) -> None:
        for minutes in self._presets:
            btn = QPushButton(f"{minutes} min", parent)
            btn.setObjectName("presetButton")
            btn.clicked.connect(lambda _=False, m=minutes: self._on_preset(m))
            self._preset_buttons.append(btn)
            self._preset_row.addWidget(btn)

    @staticmethod
    def _make_spin(parent: QWidget, maximum: int, suffix: str) -> QSpinBox:
        spin = QSpinBox(parent)
        spin.setRange(0, maximum)
        spin.setSuffix(suffix)
        spin.setAlignment(Qt.AlignmentFlag.AlignRight)
        return spin

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self._on_start_pause)
        self._reset_btn.clicked.connect(self._on_reset)
        self._lap_btn.clicked.connect(self._controller.record_lap)
        self._clear_laps_btn.clicked.connect(self._controller.clear_laps)
        for spin in (self._hours, self._minutes, self._seconds):
            spin.valueChanged.connect(self._on_inputs_changed)

        self._controller.tick.connect(self._refresh_display)
        self._controller.state_changed.connect(self._on_state_changed)
        self._controller.lap_recorded.connect(self._on_lap_recorded)
        self._controller.laps_cleared.connect(self._lap_list.clear)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_start_pause(self) -> None:
        self._controller.toggle(self.duration_ms())

    def _on_reset(self) -> None:
        self._controller.reset(self.duration_ms())

    def _on_preset(self, minutes: int) -> None:
        self.set_duration_fields(*preset_to_hms(minutes))

    def _on_inputs_changed(self, *_args) -> None:
        # A running countdown ignores edits; otherwise the new value replaces it.
        if not self._controller.is_running:
            self._controller.reset(self.duration_ms())

    def _on_lap_recorded(self, lap: Lap) -> None:
        self._lap_list.addItem(format_lap(lap))
        self._lap_list.scrollToBottom()

    def _on_state_changed(self, state: TimerState) -> None:
        running = state == TimerState.RUNNING
        self._start_pause_btn.setText("Pause" if running else "Start")
        self._lap_btn.setEnabled(running)
        self._state_label.setText(STATE_LABELS.get(state, ""))
        self._time_label.setStyleSheet(f"color: {state_color(state)};")
        self._refresh_display(self._controller.remaining)

    def _refresh_display(self, remaining_ms: int) -> None:
        self.show_time(format_time(remaining_ms))
