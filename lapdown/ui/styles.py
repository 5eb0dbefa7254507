"""QSS stylesheet and state colors for Lapdown."""

from __future__ import annotations

from ..timer.engine import TimerState

# ── time-display colour per timer state ──────────────────────────────────

STATE_COLORS: dict[TimerState, str] = {
    TimerState.IDLE:     "#E2E2F0",
    TimerState.RUNNING:  "#89B4FA",   # calm blue
    TimerState.PAUSED:   "#6C7086",   # desaturated gray
    TimerState.FINISHED: "#F38BA8",   # alert pink
}

# ── default palette ──────────────────────────────────────────────────────

_DEFAULT_PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#CBA6F7",
    "accent2":      "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


def get_palette() -> dict[str, str]:
    return dict(_DEFAULT_PALETTE)


def state_color(state: TimerState) -> str:
    return STATE_COLORS.get(state, _DEFAULT_PALETTE["text"])


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or _DEFAULT_PALETTE
    return f"""
    QMainWindow, QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 14px;
    }}

    QLabel#timeLabel {{
        font-size: 64px;
        font-weight: 700;
    }}

    QLabel#stateLabel {{
        font-size: 12px;
        font-weight: 700;
        color: {p['text_muted']};
        letter-spacing: 2px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 8px 16px;
    }}

    QPushButton:hover {{
        border-color: {p['accent']};
    }}

    QPushButton:disabled {{
        color: {p['text_muted']};
        border-color: {p['bg_secondary']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 12px 36px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
        border-color: {p['danger']};
    }}

    QPushButton#presetButton {{
        color: {p['text_muted']};
        padding: 6px 12px;
        font-size: 13px;
    }}

    /* ── inputs ──────────────────────────────────── */
    QSpinBox {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 6px 10px;
        font-size: 16px;
    }}

    QSpinBox:focus {{
        border-color: {p['accent']};
    }}

    /* ── lap list ────────────────────────────────── */
    QListWidget {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        font-family: Menlo, monospace;
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    QStatusBar {{
        background-color: {p['bg']};
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
