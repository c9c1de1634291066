"""Unit and time helpers shared by every provider converter."""

from __future__ import annotations

import datetime as dt
import math
from typing import List, Optional, Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def epoch_to_datetime(seconds: Optional[float]) -> Optional[dt.datetime]:
    """Convert provider epoch seconds into an aware UTC datetime."""
    if seconds is None:
        return None
    millis = int(seconds) * 1000
    return dt.datetime.fromtimestamp(millis / 1000, tz=dt.timezone.utc)


def ensure_aware(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    """Treat naive provider timestamps as UTC so every exposed instant is absolute."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def ratio_to_percent(value: Optional[float]) -> Optional[float]:
    """0..1 fraction -> 0..100 percent."""
    if value is None:
        return None
    return value * 100


def ratio_to_rounded_percent(value: Optional[float]) -> Optional[int]:
    if value is None:
        return None
    return round_half_up(value * 100)


def km_to_m(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return value * 1000


def ms_to_kmh(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return value * 3.6


def moon_phase_angle(fraction: Optional[float]) -> Optional[int]:
    """Lunation fraction (0 new, 0.5 full) -> angle in degrees."""
    if fraction is None:
        return None
    return round_half_up(fraction * 360)


def minute_intervals(times: Sequence[dt.datetime]) -> List[Optional[int]]:
    """Interval in minutes attached to each minutely sample.

    Each sample gets the gap to the next one; the last sample reuses the gap
    to the previous one. A lone sample has no interval.
    """
    count = len(times)
    if count < 2:
        return [None] * count
    out: List[Optional[int]] = []
    for i, current in enumerate(times):
        if i < count - 1:
            gap = times[i + 1] - current
        else:
            gap = current - times[i - 1]
        out.append(round_half_up(gap.total_seconds() / 60))
    return out
