"""Tests for the widgets: timer card, title flashing, settings dialog, main window."""

from __future__ import annotations

import pytest
from PyQt6.QtCore import Qt, QEvent
from PyQt6.QtGui import QKeyEvent
from PyQt6.QtWidgets import QWidget

from lapdown.settings import Settings, load_settings
from lapdown.timer.engine import TimerState
from lapdown.timer.laps import Lap
from lapdown.ui.settings_dialog import SettingsDialog, parse_presets
from lapdown.ui.timer_widget import TimerWidget, format_lap
from lapdown.ui.title_flash import TitleFlasher, FLASH_TEXT, FLASH_TOGGLES

from helpers import SignalCollector


# ═══════════════════════════════════════════════════════════════════════
#  TIMER WIDGET
# ═══════════════════════════════════════════════════════════════════════


@pytest.fixture
def widget(controller):
    return TimerWidget(controller)


class TestTimerWidget:

    def test_initial_display(self, widget):
        assert widget._time_label.text() == "00:00"
        assert widget._start_pause_btn.text() == "Start"
        assert not widget._lap_btn.isEnabled()

    def test_inputs_drive_idle_engine(self, widget, controller):
        widget.set_duration_fields(0, 2, 30)
        assert widget.duration_ms() == 150_000
        assert controller.remaining == 150_000
        assert widget._time_label.text() == "02:30"

    def test_preset_fills_inputs(self, widget, controller):
        widget._on_preset(90)
        assert (widget._hours.value(), widget._minutes.value(), widget._seconds.value()) == (1, 30, 0)
        assert controller.remaining == 90 * 60 * 1000

    def test_start_pause_button(self, widget, controller, clock):
        widget.set_duration_fields(0, 0, 10)
        widget._start_pause_btn.click()
        assert controller.state == TimerState.RUNNING
        assert widget._start_pause_btn.text() == "Pause"
        assert widget._lap_btn.isEnabled()

        clock.advance(4000)
        widget._start_pause_btn.click()
        assert controller.state == TimerState.PAUSED
        assert widget._time_label.text() == "00:06"

    def test_inputs_ignored_while_running(self, widget, controller, clock):
        widget.set_duration_fields(0, 0, 10)
        controller.start()
        clock.advance(3000)
        widget.set_duration_fields(0, 5, 0)
        assert controller.state == TimerState.RUNNING
        assert controller.remaining == 7000

    def test_inputs_replace_paused_run(self, widget, controller, clock):
        widget.set_duration_fields(0, 0, 10)
        controller.start()
        clock.advance(3000)
        controller.pause()
        widget.set_duration_fields(0, 5, 0)
        assert controller.state == TimerState.IDLE
        assert controller.remaining == 300_000
        assert widget._time_label.text() == "05:00"

    def test_preset_after_finish_loads_new_duration(self, widget, controller, clock):
        widget.set_duration_fields(0, 0, 2)
        controller.start()
        clock.advance(2000)
        controller.poll()
        assert controller.state == TimerState.FINISHED
        widget._on_preset(1)
        assert controller.state == TimerState.IDLE
        assert controller.remaining == 60_000
        assert widget._time_label.text() == "01:00"

    def test_lap_button_adds_row(self, widget, controller, clock):
        widget.set_duration_fields(0, 1, 0)
        controller.start()
        clock.advance(2000)
        widget._lap_btn.click()
        assert widget._lap_list.count() == 1
        assert "00:02" in widget._lap_list.item(0).text()
        assert "left 00:58" in widget._lap_list.item(0).text()

    def test_clear_and_reset_empty_the_list(self, widget, controller, clock):
        widget.set_duration_fields(0, 1, 0)
        controller.start()
        clock.advance(1000)
        controller.record_lap()
        widget._clear_laps_btn.click()
        assert widget._lap_list.count() == 0

        clock.advance(1000)
        controller.record_lap()
        widget._reset_btn.click()
        assert widget._lap_list.count() == 0
        assert controller.state == TimerState.IDLE
        assert controller.remaining == 60_000

    def test_finished_state_label(self, widget, controller, clock):
        widget.set_duration_fields(0, 0, 1)
        controller.start()
        clock.advance(1000)
        controller.poll()
        assert widget._state_label.text() == "TIME'S UP"
        assert widget._time_label.text() == "00:00"
        assert widget._start_pause_btn.text() == "Start"

    def test_set_presets_rebuilds_buttons(self, widget):
        widget.set_presets([2, 45])
        assert widget.presets == (2, 45)
        assert [b.text() for b in widget._preset_buttons] == ["2 min", "45 min"]

    def test_format_lap(self):
        text = format_lap(Lap(index=3, duration_ms=65_000, remaining_at_lap_ms=5_000))
        assert text.startswith("Lap 3")
        assert "01:05" in text
        assert "(left 00:05)" in text


# ═══════════════════════════════════════════════════════════════════════
#  TITLE FLASHER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestTitleFlasher:

    def _make(self):
        target = QWidget()
        target.setWindowTitle("Lapdown")
        return target, TitleFlasher(target)

    def test_alternates_then_restores(self):
        target, flasher = self._make()
        done = SignalCollector()
        flasher.finished.connect(done)

        flasher.flash()
        assert flasher.is_active
        titles = []
        for _ in range(FLASH_TOGGLES):
            flasher._step()
            titles.append(target.windowTitle())

        assert titles[:-1] == [FLASH_TEXT, "Lapdown", FLASH_TEXT, "Lapdown", FLASH_TEXT]
        assert target.windowTitle() == "Lapdown"
        assert not flasher.is_active
        assert len(done) == 1

    def test_flash_again_restarts(self):
        target, flasher = self._make()
        flasher.flash()
        flasher._step()
        assert target.windowTitle() == FLASH_TEXT
        flasher.flash()
        assert target.windowTitle() == "Lapdown"
        flasher._step()
        assert target.windowTitle() == FLASH_TEXT

    def test_cancel_restores(self):
        target, flasher = self._make()
        flasher.flash()
        flasher._step()
        flasher.cancel()
        assert target.windowTitle() == "Lapdown"
        assert not flasher.is_active


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS DIALOG
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSettingsDialog:

    def test_reflects_settings(self):
        s = Settings(poll_interval_ms=150, sound_volume=50, presets_minutes=[2, 7])
        dlg = SettingsDialog(s)
        assert dlg.windowTitle() == "Settings"
        assert dlg._poll_spin.value() == 150
        assert dlg._vol_slider.value() == 50
        assert dlg._presets_edit.text() == "2, 7"

    def test_changes_are_saved(self):
        s = Settings()
        dlg = SettingsDialog(s)
        dlg._vibrate_cb.setChecked(False)
        assert s.vibrate_enabled is False
        assert load_settings().vibrate_enabled is False

    def test_presets_edit(self):
        s = Settings()
        dlg = SettingsDialog(s)
        dlg._presets_edit.setText("15, x, 30, 15")
        dlg._on_presets_changed()
        assert s.presets_minutes == [15, 30]

    def test_empty_presets_keep_old_list(self):
        s = Settings(presets_minutes=[4])
        dlg = SettingsDialog(s)
        dlg._presets_edit.setText("nope")
        dlg._on_presets_changed()
        assert s.presets_minutes == [4]
        assert dlg._presets_edit.text() == "4"

    def test_sound_preview_callback(self):
        calls: list[bool] = []
        dlg = SettingsDialog(Settings(), sound_preview_callback=lambda: calls.append(True))
        dlg._on_volume_released()
        assert calls == [True]

    def test_parse_presets(self):
        assert parse_presets("1;2, 0, -3, 10") == [1, 2, 10]


# ═══════════════════════════════════════════════════════════════════════
#  MAIN WINDOW
# ═══════════════════════════════════════════════════════════════════════


@pytest.fixture
def window(qapp, clock, tmp_path):
    from lapdown.app import LapdownApp
    return LapdownApp(settings=Settings(), clock=clock, sounds_dir=tmp_path / "sounds")


def _press(window, key):
    event = QKeyEvent(QEvent.Type.KeyPress, key.value, Qt.KeyboardModifier.NoModifier)
    window.keyPressEvent(event)


class TestMainWindow:

    def test_title_shows_countdown_while_running(self, window, clock):
        window.timer_widget.set_duration_fields(0, 1, 0)
        window.controller.start()
        clock.advance(5000)
        window.controller.poll()
        assert window.windowTitle() == "00:55 · Lapdown"

        window.controller.pause()
        assert window.windowTitle() == "Lapdown"

    def test_space_toggles_and_r_resets(self, window, clock):
        window.timer_widget.set_duration_fields(0, 0, 30)
        _press(window, Qt.Key.Key_Space)
        assert window.controller.state == TimerState.RUNNING
        clock.advance(1000)
        _press(window, Qt.Key.Key_Space)
        assert window.controller.state == TimerState.PAUSED
        _press(window, Qt.Key.Key_R)
        assert window.controller.state == TimerState.IDLE
        assert window.controller.remaining == 30_000

    def test_finish_runs_every_consumer_once(self, window, clock, monkeypatch):
        calls: list[str] = []
        monkeypatch.setattr(window._notifier, "play_finish_pattern", lambda: calls.append("sound"))
        monkeypatch.setattr(window._notifier, "vibrate", lambda pattern=(): calls.append("vibrate"))
        window.timer_widget.set_duration_fields(0, 0, 1)
        window.controller.start()
        clock.advance(1000)
        window.controller.poll()
        window.controller.poll()

        assert calls == ["sound", "vibrate"]
        assert window.title_flasher.is_active
        assert window.windowTitle() == "Lapdown"
        window.title_flasher._step()
        assert window.windowTitle() == FLASH_TEXT

    def test_title_flash_can_be_disabled(self, qapp, clock, tmp_path):
        from lapdown.app import LapdownApp
        win = LapdownApp(
            settings=Settings(title_flash_enabled=False, sound_enabled=False, vibrate_enabled=False),
            clock=clock, sounds_dir=tmp_path / "sounds",
        )
        win.timer_widget.set_duration_fields(0, 0, 1)
        win.controller.start()
        clock.advance(1000)
        win.controller.poll()
        assert win.controller.state == TimerState.FINISHED
        assert not win.title_flasher.is_active


# ═══════════════════════════════════════════════════════════════════════
#  COLLABORATOR CALL SHAPES
# ═══════════════════════════════════════════════════════════════════════


class TestCallShapes:

    def test_widgets_match_collaborator_protocols(self, window):
        from lapdown.timer.interfaces import (
            DurationProvider, DisplaySink, NotificationSink, TitleSink,
        )
        assert isinstance(window.timer_widget, DurationProvider)
        assert isinstance(window.timer_widget, DisplaySink)
        assert isinstance(window._notifier, NotificationSink)
        assert isinstance(window.title_flasher, TitleSink)

    def test_window_drives_collaborators_through_call_shapes(self, window, clock):
        class FixedDuration:
            def duration_ms(self):
                return 42_000

        class CountingTitle:
            def __init__(self):
                self.flashes = 0

            def flash(self):
                self.flashes += 1

        title = CountingTitle()
        window._durations = FixedDuration()
        window._title_sink = title
        _press(window, Qt.Key.Key_R)
        assert window.controller.remaining == 42_000

        _press(window, Qt.Key.Key_Space)
        clock.advance(42_000)
        window.controller.poll()
        assert title.flashes == 1
