"""Settings dialog for Lapdown.

A modal dialog for poll rate, presets and finish-notification
preferences.  Changes are saved immediately to disk; the caller re-applies
the shared ``Settings`` object after the dialog closes.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QSlider, QCheckBox, QPushButton,
    QFrame, QWidget, QLineEdit,
)

from ..settings import Settings, save_settings
from ..timer.controller import MIN_POLL_INTERVAL_MS, MAX_POLL_INTERVAL_MS


def parse_presets(text: str) -> list[int]:
    """``"1, 5, 25"`` → ``[1, 5, 25]``.  Junk and non-positive values are dropped."""
    presets: list[int] = []
    for part in text.replace(";", ",").split(","):
        part = part.strip()
        if part.isdigit() and int(part) > 0 and int(part) not in presets:
            presets.append(int(part))
    return presets


class SettingsDialog(QDialog):
    """Modal dialog for all user preferences."""

    def __init__(
        self,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        sound_preview_callback: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(400)
        self.setModal(True)

        self._settings = settings
        self._sound_preview = sound_preview_callback

        self._build_ui()
        self._populate()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        # ── Timer section ────────────────────────────────────────────
        root.addWidget(self._section_label("Timer"))
        timer_form = QFormLayout()
        timer_form.setHorizontalSpacing(20)
        timer_form.setVerticalSpacing(10)

        self._poll_spin = QSpinBox()
        self._poll_spin.setRange(MIN_POLL_INTERVAL_MS, MAX_POLL_INTERVAL_MS)
        self._poll_spin.setSingleStep(10)
        self._poll_spin.setSuffix(" ms")
        self._poll_spin.valueChanged.connect(self._on_timer_changed)
        timer_form.addRow("Refresh every:", self._poll_spin)

        self._presets_edit = QLineEdit()
        self._presets_edit.setPlaceholderText("1, 3, 5, 10, 25")
        self._presets_edit.editingFinished.connect(self._on_presets_changed)
        timer_form.addRow("Presets (min):", self._presets_edit)

        root.addLayout(timer_form)
        root.addWidget(self._separator())

        # ── Finish notification section ──────────────────────────────
        root.addWidget(self._section_label("When time is up"))
        fin_form = QFormLayout()
        fin_form.setHorizontalSpacing(20)
        fin_form.setVerticalSpacing(10)

        self._sound_cb = QCheckBox("Play sound")
        self._sound_cb.toggled.connect(self._on_toggle_changed)
        fin_form.addRow("", self._sound_cb)

        vol_row = QHBoxLayout()
        vol_row.setSpacing(10)
        self._vol_slider = QSlider(Qt.Orientation.Horizontal)
        self._vol_slider.setRange(0, 100)
        self._vol_slider.setTickInterval(10)
        self._vol_label = QLabel("70%")
        self._vol_label.setMinimumWidth(36)
        self._vol_slider.valueChanged.connect(self._on_volume_changed)
        self._vol_slider.sliderReleased.connect(self._on_volume_released)
        vol_row.addWidget(self._vol_slider)
        vol_row.addWidget(self._vol_label)

        vol_wrapper = QWidget()
        vol_wrapper.setLayout(vol_row)
        fin_form.addRow("Volume:", vol_wrapper)

        self._vibrate_cb = QCheckBox("Request attention (vibrate)")
        self._vibrate_cb.toggled.connect(self._on_toggle_changed)
        fin_form.addRow("", self._vibrate_cb)

        self._flash_cb = QCheckBox("Flash window title")
        self._flash_cb.toggled.connect(self._on_toggle_changed)
        fin_form.addRow("", self._flash_cb)

        root.addLayout(fin_form)
        root.addWidget(self._separator())

        # ── Window section ───────────────────────────────────────────
        win_form = QFormLayout()
        self._on_top_cb = QCheckBox("Keep window on top")
        self._on_top_cb.toggled.connect(self._on_toggle_changed)
        win_form.addRow("", self._on_top_cb)
        root.addLayout(win_form)

        # ── close button ─────────────────────────────────────────────
        root.addStretch()
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        btn_row.addWidget(close_btn)
        root.addLayout(btn_row)

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700; margin-top: 4px;")
        return lbl

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        line.setFixedHeight(1)
        line.setStyleSheet("background-color: rgba(255,255,255,0.08);")
        return line

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE FROM SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def _populate(self) -> None:
        s = self._settings
        # Populate without saving back half-filled values.
        for w in (self._poll_spin, self._sound_cb, self._vol_slider,
                  self._vibrate_cb, self._flash_cb, self._on_top_cb):
            w.blockSignals(True)
        self._poll_spin.setValue(s.poll_interval_ms)
        self._presets_edit.setText(", ".join(str(m) for m in s.presets_minutes))
        self._sound_cb.setChecked(s.sound_enabled)
        self._vol_slider.setValue(s.sound_volume)
        self._vol_label.setText(f"{s.sound_volume}%")
        self._vibrate_cb.setChecked(s.vibrate_enabled)
        self._flash_cb.setChecked(s.title_flash_enabled)
        self._on_top_cb.setChecked(s.always_on_top)
        for w in (self._poll_spin, self._sound_cb, self._vol_slider,
                  self._vibrate_cb, self._flash_cb, self._on_top_cb):
            w.blockSignals(False)

    # ══════════════════════════════════════════════════════════════════
    #  CHANGE HANDLERS (saved immediately)
    # ══════════════════════════════════════════════════════════════════

    def _on_timer_changed(self) -> None:
        self._settings.poll_interval_ms = self._poll_spin.value()
        self._save()

    def _on_presets_changed(self) -> None:
        presets = parse_presets(self._presets_edit.text())
        if not presets:
            # Keep the old list rather than leave the preset row empty.
            self._presets_edit.setText(
                ", ".join(str(m) for m in self._settings.presets_minutes)
            )
            return
        self._settings.presets_minutes = presets
        self._save()

    def _on_toggle_changed(self) -> None:
        self._settings.sound_enabled = self._sound_cb.isChecked()
        self._settings.vibrate_enabled = self._vibrate_cb.isChecked()
        self._settings.title_flash_enabled = self._flash_cb.isChecked()
        self._settings.always_on_top = self._on_top_cb.isChecked()
        self._save()

    def _on_volume_changed(self, value: int) -> None:
        self._vol_label.setText(f"{value}%")
        self._settings.sound_volume = value
        self._save()

    def _on_volume_released(self) -> None:
        """Preview the sound when the user releases the volume slider."""
        if self._sound_preview:
            self._sound_preview()

    def _save(self) -> None:
        save_settings(self._settings)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def settings(self) -> Settings:
        return self._settings
