"""Shared pytest fixtures for Lapdown tests."""

import sys
import pytest

from lapdown.clock import ManualClock
from lapdown.timer.engine import TimerEngine


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    from PyQt6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def settings_dir(tmp_path, monkeypatch):
    """Keep every test away from the real settings file and sound cache."""
    monkeypatch.setattr("lapdown.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr("lapdown.settings.SETTINGS_PATH", tmp_path / "settings.json")
    monkeypatch.setattr("lapdown.audio.sounds.SOUNDS_DIR", tmp_path / "sounds")
    yield tmp_path


@pytest.fixture
def clock():
    return ManualClock(start_ms=1_000_000)


@pytest.fixture
def engine(clock):
    """Fresh engine on a hand-driven clock."""
    return TimerEngine(clock=clock)


@pytest.fixture
def controller(qapp, clock):
    from lapdown.timer.controller import TimerController
    return TimerController(parent=None, clock=clock)
