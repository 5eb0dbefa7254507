"""Duration parsing and formatting.

Input fields hold hours, minutes and seconds as free text.  They are
clamped field by field (hours 0-99, minutes and seconds 0-59) so the value
handed to the engine is always a non-negative whole number of
milliseconds.
"""

from __future__ import annotations

MAX_HOURS = 99
MAX_MINUTES = 59
MAX_SECONDS = 59

DEFAULT_PRESETS_MINUTES = (1, 3, 5, 10, 25)


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def _to_int(raw: object) -> int:
    """Lenient integer read: blanks and junk count as 0."""
    if raw is None:
        return 0
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip() or "0", 10)
    except ValueError:
        return 0


def parse_hms(hours: object = 0, minutes: object = 0, seconds: object = 0) -> int:
    """Turn three input-field values into milliseconds."""
    h = _clamp(_to_int(hours), 0, MAX_HOURS)
    m = _clamp(_to_int(minutes), 0, MAX_MINUTES)
    s = _clamp(_to_int(seconds), 0, MAX_SECONDS)
    return (h * 3600 + m * 60 + s) * 1000


def ms_to_hms(ms: int) -> tuple[int, int, int]:
    """Split milliseconds into whole (hours, minutes, seconds).

    Partial seconds are dropped, so 59 999 ms reads as 00:59.
    """
    total = max(0, int(ms) // 1000)
    h, rest = divmod(total, 3600)
    m, s = divmod(rest, 60)
    return h, m, s


def format_time(ms: int) -> str:
    """``HH:MM:SS`` when there are hours, else ``MM:SS``."""
    h, m, s = ms_to_hms(ms)
    if h > 0:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def preset_to_hms(minutes: int) -> tuple[int, int, int]:
    """Field values for a preset button (e.g. 90 → (1, 30, 0))."""
    return ms_to_hms(minutes * 60 * 1000)
