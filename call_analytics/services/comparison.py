"""
Period-over-period comparison.

calculate_delta always reports the raw mathematical direction. Metrics where
a decrease is favorable (handle time, open tickets, cost) are inverted by the
metric builder through invert_trend, never here.
"""

import math
from typing import Optional

from call_analytics.models.enums import TrendDirection
from call_analytics.models.schemas import TrendDelta
from call_analytics.utils.numbers import round1

# Rounded changes smaller than this are noise
NOISE_THRESHOLD = 0.1


def calculate_delta(current: float, previous: Optional[float] = None) -> TrendDelta:
    """
    Percentage change from `previous` to `current`.

    Rules:
        - previous missing or exactly zero: (None, flat); a zero baseline
          makes the change undefined
        - non-finite change: (None, flat)
        - |rounded change| < 0.1: (0, flat)
        - otherwise one-decimal change, up if positive, down if negative

    Example:
        >>> calculate_delta(120, 100)
        TrendDelta(delta=20.0, trend=<TrendDirection.UP: 'up'>)
        >>> calculate_delta(5, 0).delta is None
        True
    """
    if previous is None or previous == 0:
        return TrendDelta(delta=None, trend=TrendDirection.FLAT)

    try:
        raw_change = (current - previous) / abs(previous) * 100
    except (TypeError, OverflowError):
        return TrendDelta(delta=None, trend=TrendDirection.FLAT)

    if not math.isfinite(raw_change):
        return TrendDelta(delta=None, trend=TrendDirection.FLAT)

    rounded = round1(raw_change)
    if abs(rounded) < NOISE_THRESHOLD:
        return TrendDelta(delta=0.0, trend=TrendDirection.FLAT)

    return TrendDelta(
        delta=rounded,
        trend=TrendDirection.UP if rounded > 0 else TrendDirection.DOWN,
    )


def invert_trend(trend: TrendDirection) -> TrendDirection:
    """Swap up and down; flat stays flat."""
    if trend == TrendDirection.UP:
        return TrendDirection.DOWN
    if trend == TrendDirection.DOWN:
        return TrendDirection.UP
    return TrendDirection.FLAT
