"""Finish notification sink: sound plus a vibration stand-in.

Desktops have no vibration motor.  ``vibrate()`` asks the window system for
attention instead (dock bounce on macOS, taskbar flash elsewhere) for as
long as the pattern would have lasted.
"""

from __future__ import annotations

import logging
from typing import Sequence

from PyQt6.QtWidgets import QApplication, QWidget

from ..audio.sounds import SoundManager
from ..settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_VIBRATION_PATTERN: tuple[int, ...] = (200, 120, 200, 120, 400)


class FinishNotifier:

    def __init__(
        self,
        settings: Settings,
        *,
        sounds: SoundManager | None = None,
        window: QWidget | None = None,
    ) -> None:
        self._settings = settings
        self._sounds = sounds
        self._window = window

    def play_finish_pattern(self) -> bool:
        if not self._settings.sound_enabled or self._sounds is None:
            return False
        return self._sounds.play_finish_pattern()

    def vibrate(self, pattern: Sequence[int] = DEFAULT_VIBRATION_PATTERN) -> bool:
        """Request attention for ``sum(pattern)`` ms.  False when skipped."""
        if not self._settings.vibrate_enabled or self._window is None:
            return False
        total_ms = sum(max(0, int(step)) for step in pattern)
        if total_ms == 0:
            return False
        QApplication.alert(self._window, total_ms)
        logger.debug("attention requested for %d ms", total_ms)
        return True
