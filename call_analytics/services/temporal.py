"""
Temporal aggregation: dense volume series, peak detection, trend smoothing
and the weekday/hour heatmap.

Modes:
    - hourly: one bucket per hour from 00:00 of the first day through 23:00
      of the last day in range
    - daily: one bucket per calendar date in range
    Auto-selection picks daily when the range spans more than one day
    (ceil((end - start) / 1 day) > 1), hourly otherwise.

Dense Fill:
    Every bucket of the range is materialized, including empty ones, so
    consumers can render a gap-free series. Buckets are built with
    pandas.date_range and filled through groupby + reindex.

Peak Detection:
    Among buckets with calls > 0, sort counts descending and take the value at
    index floor(0.25 * n) as threshold. Every bucket with calls >= threshold
    (and calls > 0) is a peak. An all-zero series has no peaks.

Moving Average:
    Mean of each point and up to w-1 preceding points (shrinking window at the
    start, no look-ahead), rounded to 2 decimals. Index 0 always equals its
    raw value.

Heatmap:
    Calls grouped by (weekday, hour) across the whole range, sorted Monday to
    Sunday then by hour. fill_heatmap_grid completes the 7 x 24 grid.

Timestamps are bucketed on local wall-clock time (see utils.dates.to_local).
"""

import math
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from call_analytics.models.enums import TemporalMode
from call_analytics.models.schemas import (
    DateRange,
    HeatmapCell,
    RawCallRecord,
    TrendPoint,
    VolumeBucket,
)
from call_analytics.utils.dates import to_local
from call_analytics.utils.labels import LabelResolver, resolve_label
from call_analytics.utils.numbers import round_half_up, round_int


# =============================================================================
# Constants
# =============================================================================

PEAK_QUANTILE = 0.25
DEFAULT_MOVING_AVERAGE_WINDOW = 3

HOURLY_LABEL_FORMAT = "%d/%m %H:00"
DAILY_LABEL_FORMAT = "%d/%m/%Y"

_FREQUENCY = {
    TemporalMode.HOURLY: "h",
    TemporalMode.DAILY: "D",
}


# =============================================================================
# Mode Selection
# =============================================================================


def select_mode(
    date_range: DateRange,
    mode: Optional[TemporalMode] = None,
) -> TemporalMode:
    """Return the forced mode, or auto-select from the range span."""
    if mode is not None:
        return TemporalMode(mode)
    span_days = math.ceil((date_range.end - date_range.start).total_seconds() / 86400)
    return TemporalMode.DAILY if span_days > 1 else TemporalMode.HOURLY


def bucket_index(
    date_range: DateRange,
    mode: TemporalMode,
    timezone: Optional[str] = None,
) -> pd.DatetimeIndex:
    """All bucket start times of the range for `mode`."""
    first_day = pd.Timestamp(to_local(date_range.start, timezone).date())
    last_day = pd.Timestamp(to_local(date_range.end, timezone).date())
    if mode == TemporalMode.HOURLY:
        return pd.date_range(start=first_day, end=last_day + pd.Timedelta(hours=23), freq="h")
    return pd.date_range(start=first_day, end=last_day, freq="D")


# =============================================================================
# Peak Detection
# =============================================================================


def peak_threshold(counts: Sequence[int]) -> Optional[int]:
    """
    Top-quartile threshold among positive counts, or None when all are zero.

    Example:
        >>> peak_threshold([0, 5, 1, 3])
        5
        >>> peak_threshold([0, 0]) is None
        True
    """
    values = np.asarray(counts, dtype=float)
    positive = np.sort(values[values > 0])[::-1]
    if positive.size == 0:
        return None
    return int(positive[int(math.floor(PEAK_QUANTILE * positive.size))])


def mark_peaks(counts: Sequence[int]) -> List[bool]:
    """Peak flag for each count."""
    threshold = peak_threshold(counts)
    if threshold is None:
        return [False] * len(counts)
    return [count > 0 and count >= threshold for count in counts]


# =============================================================================
# Volume Series
# =============================================================================


def _calls_frame(calls: Iterable[RawCallRecord], timezone: Optional[str]) -> pd.DataFrame:
    records = [(to_local(call.created_at, timezone), call.duration) for call in calls]
    frame = pd.DataFrame(records, columns=["timestamp", "duration"])
    frame["timestamp"] = pd.to_datetime(frame["timestamp"])
    frame["duration"] = pd.to_numeric(frame["duration"]).astype(float)
    return frame


def _bucket_label(moment: pd.Timestamp, mode: TemporalMode) -> str:
    if mode == TemporalMode.HOURLY:
        return moment.strftime(HOURLY_LABEL_FORMAT)
    return moment.strftime(DAILY_LABEL_FORMAT)


def build_volume_series(
    calls: Iterable[RawCallRecord],
    date_range: DateRange,
    mode: Optional[TemporalMode] = None,
    timezone: Optional[str] = None,
) -> List[VolumeBucket]:
    """
    Dense call volume series for the range with peak flags.

    Args:
        calls: Call records of the period
        date_range: Reporting window
        mode: Forced mode; auto-selected when None
        timezone: IANA zone for aware timestamps

    Returns:
        One VolumeBucket per hour or day, chronological.
    """
    selected = select_mode(date_range, mode)
    index = bucket_index(date_range, selected, timezone)

    frame = _calls_frame(calls, timezone)
    frame["bucket"] = frame["timestamp"].dt.floor(_FREQUENCY[selected])
    grouped = (
        frame.groupby("bucket")["duration"]
        .agg(["size", "sum"])
        .reindex(index, fill_value=0)
    )

    counts = [int(value) for value in grouped["size"].tolist()]
    durations = [float(value) for value in grouped["sum"].tolist()]
    peaks = mark_peaks(counts)

    return [
        VolumeBucket(
            label=_bucket_label(moment, selected),
            start=moment.to_pydatetime(),
            calls=count,
            totalDuration=round_half_up(duration, 2),
            isPeak=is_peak,
            mode=selected,
        )
        for moment, count, duration, is_peak in zip(index, counts, durations, peaks)
    ]


# =============================================================================
# Trend Smoothing
# =============================================================================


def build_trend_points(volume: Iterable[VolumeBucket]) -> List[TrendPoint]:
    """
    Collapse volume buckets into trend points keyed by trimmed label.

    Buckets sharing a label are summed; first-seen order is kept.
    """
    points: dict = {}
    for bucket in volume:
        key = bucket.label.strip()
        point = points.get(key)
        if point is None:
            points[key] = TrendPoint(label=key, calls=bucket.calls, isPeak=bucket.isPeak)
        else:
            points[key] = point.model_copy(update={
                "calls": point.calls + bucket.calls,
                "isPeak": point.isPeak or bucket.isPeak,
            })
    return list(points.values())


def with_moving_average(
    points: Sequence[TrendPoint],
    window: int = DEFAULT_MOVING_AVERAGE_WINDOW,
) -> List[TrendPoint]:
    """
    Attach a trailing moving average to every point.

    Returns new points; the input sequence is not modified.
    """
    if not points:
        return []

    calls = np.array([point.calls for point in points], dtype=float)
    if window <= 1:
        averages = calls
    else:
        cumulative = np.concatenate(([0.0], np.cumsum(calls)))
        positions = np.arange(len(calls))
        starts = np.maximum(0, positions - window + 1)
        averages = (cumulative[positions + 1] - cumulative[starts]) / (positions + 1 - starts)

    return [
        point.model_copy(update={"movingAverage": round_half_up(float(average), 2)})
        for point, average in zip(points, averages)
    ]


# =============================================================================
# Heatmap
# =============================================================================


def build_heatmap(
    calls: Iterable[RawCallRecord],
    timezone: Optional[str] = None,
    resolver: Optional[LabelResolver] = None,
) -> List[HeatmapCell]:
    """
    Calls per (weekday, hour) across the range; only cells with calls.

    Sorted Monday to Sunday, then hour ascending. avgDuration averages over
    all calls of the cell, missed ones included.
    """
    frame = _calls_frame(calls, timezone)
    if frame.empty:
        return []

    frame["weekday"] = frame["timestamp"].dt.weekday
    frame["hour"] = frame["timestamp"].dt.hour
    grouped = frame.groupby(["weekday", "hour"], sort=True)["duration"].agg(["size", "sum"])

    counts = [int(value) for value in grouped["size"].tolist()]
    peaks = mark_peaks(counts)

    cells = []
    for (weekday, hour), count, duration, is_peak in zip(
        grouped.index, counts, grouped["sum"].tolist(), peaks
    ):
        cells.append(HeatmapCell(
            day=resolve_label(f"weekday.{int(weekday)}", resolver),
            hour=int(hour),
            calls=count,
            avgDuration=round_int(float(duration) / count),
            isPeak=is_peak,
        ))
    return cells


def fill_heatmap_grid(
    cells: Iterable[HeatmapCell],
    resolver: Optional[LabelResolver] = None,
) -> List[HeatmapCell]:
    """Complete the 7 x 24 grid, keeping existing cells and zero-filling the rest."""
    existing = {(cell.day, cell.hour): cell for cell in cells}
    grid = []
    for weekday in range(7):
        day = resolve_label(f"weekday.{weekday}", resolver)
        for hour in range(24):
            grid.append(existing.get((day, hour)) or HeatmapCell(day=day, hour=hour))
    return grid
