"""Sound synthesis and playback using numpy + QSoundEffect.

Every clip is generated programmatically as a WAV file and cached to disk,
so later launches only load files.

Sound names
-----------
- ``finish``: three rising triangle beeps then a long square beep
- ``lap``: short high tick when a lap is marked
- ``click``: soft click used to preview the volume in Settings
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Lapdown"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = ("finish", "lap", "click")

SAMPLE_RATE = 44100

# (onset ms, frequency Hz, length ms, waveform, gain)
FINISH_PATTERN: tuple[tuple[int, float, int, str, float], ...] = (
    (0,   880.0,  150, "triangle", 0.50),
    (200, 988.0,  150, "triangle", 0.50),
    (400, 1046.0, 150, "triangle", 0.50),
    (700, 880.0,  500, "square",   0.35),
)


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _envelope(length: int, attack: int = 200, release: int = 800) -> np.ndarray:
    """Linear attack/release envelope (durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    r = min(release, length - a)
    if r > 0:
        env[length - r:] = np.linspace(1.0, 0.0, r)
    return env


def _oscillator(waveform: str, freq: float, duration_s: float) -> np.ndarray:
    """One of ``sine``, ``triangle`` or ``square`` at *freq* Hz, range -1..1."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    phase = (t * freq) % 1.0
    if waveform == "sine":
        return np.sin(2 * np.pi * freq * t)
    if waveform == "triangle":
        return 4.0 * np.abs(phase - 0.5) - 1.0
    if waveform == "square":
        return np.where(phase < 0.5, 1.0, -1.0)
    raise ValueError(f"unknown waveform: {waveform!r}")


def _beep(freq: float, ms: int, waveform: str = "sine", gain: float = 0.5) -> np.ndarray:
    tone = _oscillator(waveform, freq, ms / 1000.0) * gain
    return tone * _envelope(len(tone), attack=120, release=int(SAMPLE_RATE * 0.02))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_finish() -> bytes:
    """Finish pattern, mixed into one clip so the beeps never drift apart."""
    end_ms = max(onset + length for onset, _, length, _, _ in FINISH_PATTERN)
    mix = np.zeros(int(SAMPLE_RATE * (end_ms + 50) / 1000.0))
    for onset, freq, length, waveform, gain in FINISH_PATTERN:
        tone = _beep(freq, length, waveform, gain)
        start = int(SAMPLE_RATE * onset / 1000.0)
        mix[start:start + len(tone)] += tone
    return _to_wav_bytes(mix)


def _generate_lap() -> bytes:
    tone = _beep(1318.5, 40, "sine", 0.3)
    return _to_wav_bytes(np.concatenate([tone, np.zeros(int(SAMPLE_RATE * 0.03))]))


def _generate_click() -> bytes:
    """Very short tick, padded so QSoundEffect doesn't clip it."""
    tone = _beep(1200.0, 15, "sine", 0.2)
    return _to_wav_bytes(np.concatenate([tone, np.zeros(int(SAMPLE_RATE * 0.03))]))


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "finish": _generate_finish,
    "lap": _generate_lap,
    "click": _generate_click,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Manages sound synthesis, caching, and playback.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.play_finish_pattern()
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> bool:
        """Play a sound by name.  Returns False if disabled or unknown."""
        if not self._enabled:
            return False
        effect = self._effects.get(name)
        if effect is None:
            logger.debug("no sound loaded for %r", name)
            return False
        effect.play()
        return True

    def play_finish_pattern(self) -> bool:
        return self.play("finish")

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
