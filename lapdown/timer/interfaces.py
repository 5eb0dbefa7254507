"""Call shapes the timer core expects from its collaborators.

The engine never imports an implementation of any of these; the UI layer
supplies them.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class DurationProvider(Protocol):
    def duration_ms(self) -> int:
        """Currently configured duration, already clamped to >= 0."""
        ...


@runtime_checkable
class DisplaySink(Protocol):
    def show_time(self, text: str) -> None: ...


@runtime_checkable
class NotificationSink(Protocol):
    def play_finish_pattern(self) -> None: ...

    def vibrate(self, pattern: Sequence[int]) -> None: ...


@runtime_checkable
class TitleSink(Protocol):
    def flash(self) -> None: ...
