"""Lap bookkeeping for a running countdown.

A lap is measured in *remaining* time: the cursor holds the remaining
milliseconds at the previous checkpoint and each new lap is the amount the
remaining time has dropped since then.  Because remaining time freezes while
paused, paused time never leaks into a lap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from .errors import PreconditionError

if TYPE_CHECKING:
    from .engine import TimerEngine


@dataclass(frozen=True)
class Lap:
    index: int                  # 1-based
    duration_ms: int
    remaining_at_lap_ms: int


class LapTracker:
    """Ordered lap history bound to one engine."""

    def __init__(self, engine: TimerEngine) -> None:
        self._engine = engine
        self._laps: list[Lap] = []
        self._cursor: int | None = None

    # ── reads ─────────────────────────────────────────────────────────

    @property
    def laps(self) -> tuple[Lap, ...]:
        return tuple(self._laps)

    @property
    def cursor_ms(self) -> int | None:
        """Remaining time at the last checkpoint, or None when unanchored."""
        return self._cursor

    @property
    def total_ms(self) -> int:
        return sum(lap.duration_ms for lap in self._laps)

    def __len__(self) -> int:
        return len(self._laps)

    def __iter__(self) -> Iterator[Lap]:
        return iter(tuple(self._laps))

    # ── mutations ─────────────────────────────────────────────────────

    def record(self) -> Lap:
        """Close the current lap and return it.

        Raises ``PreconditionError`` unless the engine is running; the lap
        sequence is left untouched in that case.
        """
        if not self._engine.is_running:
            raise PreconditionError(
                f"cannot record a lap while {self._engine.state.value}"
            )
        current = self._engine.current_remaining()
        if self._cursor is None:
            self._cursor = current
        lap = Lap(
            index=len(self._laps) + 1,
            duration_ms=max(0, self._cursor - current),
            remaining_at_lap_ms=current,
        )
        self._laps.append(lap)
        self._cursor = current
        return lap

    def clear(self) -> None:
        """Drop every lap and re-anchor at the current remaining time."""
        self._laps.clear()
        if self._engine.is_running:
            self._cursor = self._engine.current_remaining()
        else:
            self._cursor = None

    def anchor(self, remaining_ms: int, *, rebase: bool = False) -> None:
        """Set the cursor for a run that is starting.

        A resumed run keeps its existing cursor; ``rebase`` forces a new
        one for a run that starts from a fresh duration.
        """
        if rebase or self._cursor is None:
            self._cursor = remaining_ms

    def reset(self) -> None:
        self._laps.clear()
        self._cursor = None
