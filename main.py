#!/usr/bin/env python3
"""Lapdown entry point.

Run with:
    python main.py
    python -m lapdown
"""

from lapdown.__main__ import main


if __name__ == "__main__":
    main()
