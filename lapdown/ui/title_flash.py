"""Window-title flashing.

A small scheduled effect with its own ``QTimer``: on ``flash()`` the target
window's title alternates between an alert text and the title it had when
the flash began, then the original title is restored.  It knows nothing
about the timer engine; the app connects it as a finish consumer.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, QTimer, pyqtSignal
from PyQt6.QtWidgets import QWidget

FLASH_TEXT = "⏰ Time's up!"
FLASH_INTERVAL_MS = 500
FLASH_TOGGLES = 6


class TitleFlasher(QObject):

    finished = pyqtSignal()

    def __init__(
        self,
        target: QWidget,
        parent: QObject | None = None,
        *,
        text: str = FLASH_TEXT,
        interval_ms: int = FLASH_INTERVAL_MS,
        toggles: int = FLASH_TOGGLES,
    ) -> None:
        super().__init__(parent)
        self._target = target
        self._text = text
        self._toggles = toggles
        self._original = ""
        self._count = 0

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._step)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def flash(self) -> None:
        """Start flashing.  Restarts the sequence if already flashing."""
        if self._timer.isActive():
            self._timer.stop()
            self._target.setWindowTitle(self._original)
        self._original = self._target.windowTitle()
        self._count = 0
        self._timer.start()

    def cancel(self) -> None:
        if not self._timer.isActive():
            return
        self._timer.stop()
        self._target.setWindowTitle(self._original)

    def _step(self) -> None:
        alert = self._count % 2 == 0
        self._target.setWindowTitle(self._text if alert else self._original)
        self._count += 1
        if self._count >= self._toggles:
            self._timer.stop()
            self._target.setWindowTitle(self._original)
            self.finished.emit()
