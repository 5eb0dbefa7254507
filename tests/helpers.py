"""Shared test helpers for Lapdown."""

from lapdown.clock import ManualClock
from lapdown.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions (or plain callbacks) into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def run_for(engine: TimerEngine, clock: ManualClock, ms: int, poll_ms: int = 200) -> None:
    """Advance the clock by *ms*, ticking the engine every *poll_ms* like the UI poller."""
    elapsed = 0
    while elapsed < ms:
        step = min(poll_ms, ms - elapsed)
        clock.advance(step)
        engine.tick()
        elapsed += step
