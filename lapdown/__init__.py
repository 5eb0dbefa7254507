"""Lapdown: a countdown timer with laps."""

__version__ = "0.1.0"
