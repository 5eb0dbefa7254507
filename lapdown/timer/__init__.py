"""Timer package."""

from .engine import TimerEngine, TimerState, coerce_duration
from .errors import TimerError, PreconditionError, InvalidDurationError
from .finish import FinishSignal
from .laps import Lap, LapTracker

__all__ = [
    "TimerEngine",
    "TimerState",
    "coerce_duration",
    "TimerError",
    "PreconditionError",
    "InvalidDurationError",
    "FinishSignal",
    "Lap",
    "LapTracker",
]
