"""One-shot finish notification.

Consumers are plain callables taking no arguments.  They run synchronously,
in registration order, at the moment the engine reaches zero.  A consumer
that raises is logged and skipped; the remaining consumers still run and the
engine never sees the exception.
"""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

FinishCallback = Callable[[], None]


class FinishSignal:
    def __init__(self) -> None:
        self._consumers: list[FinishCallback] = []
        self._fired: bool = False

    @property
    def fired(self) -> bool:
        """True once fired, until the next ``arm()``."""
        return self._fired

    @property
    def consumer_count(self) -> int:
        return len(self._consumers)

    def connect(self, callback: FinishCallback) -> FinishCallback:
        """Register *callback*.  Returns it, so this works as a decorator."""
        if not callable(callback):
            raise TypeError(f"finish consumer must be callable, got {callback!r}")
        self._consumers.append(callback)
        return callback

    def disconnect(self, callback: FinishCallback) -> None:
        """Remove *callback*.  Raises ``ValueError`` if it was never connected."""
        self._consumers.remove(callback)

    def arm(self) -> None:
        self._fired = False

    def fire(self) -> bool:
        """Notify every consumer, once.

        Returns False without calling anyone when the latch has already
        fired since the last ``arm()``.
        """
        if self._fired:
            return False
        self._fired = True
        # Copy: a consumer may disconnect itself.
        for callback in list(self._consumers):
            try:
                callback()
            except Exception:
                logger.exception("finish consumer %r failed", callback)
        return True
