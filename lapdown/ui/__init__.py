"""UI package."""

from .timer_widget import TimerWidget
from .title_flash import TitleFlasher
from .notifier import FinishNotifier
from .settings_dialog import SettingsDialog

__all__ = [
    "TimerWidget",
    "TitleFlasher",
    "FinishNotifier",
    "SettingsDialog",
]
