"""Timer error types."""


class TimerError(Exception):
    """Base class for every error raised by the timer core."""


class PreconditionError(TimerError):
    """The operation is not valid in the engine's current state."""


class InvalidDurationError(TimerError, ValueError):
    """A duration was negative, non-finite, fractional or not a number."""
