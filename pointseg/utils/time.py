"""Time formatting utilities.

Used for session log timestamps (time elapsed since the image was loaded).

All functions take *milliseconds* as input.
"""
from __future__ import annotations

import time


def _clamp_ms(ms: int) -> int:
    return int(ms) if int(ms) > 0 else 0


def ms_to_hhmmssmmm(ms: int) -> str:
    """Milliseconds -> 'HH:MM:SS.mmm'."""
    ms = _clamp_ms(ms)
    total_sec = ms // 1000
    mmm = ms % 1000
    hh = total_sec // 3600
    mm = (total_sec % 3600) // 60
    ss = total_sec % 60
    return f"{hh:02d}:{mm:02d}:{ss:02d}.{mmm:03d}"


def elapsed_ms(start_monotonic: float) -> int:
    """Milliseconds since a time.monotonic() reading."""
    return int((time.monotonic() - start_monotonic) * 1000)
