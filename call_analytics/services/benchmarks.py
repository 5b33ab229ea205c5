"""
Benchmark classifier.

Places three period ratios into a top / average / bottom cohort against the
configured thresholds:

    metric            value                          percentile
    resolutionRate    resolved / total tickets       round(rate * 100)
    avgHandleTime     avgCallDuration (seconds)      seconds
    ticketsPerCall    total tickets / total calls    round(ratio * 100)

Every cutoff is a lower bound, handle time included:
top if value >= top, average if value >= average, bottom otherwise.
"""

from typing import List, Optional

from call_analytics.models.enums import Cohort
from call_analytics.models.schemas import (
    BenchmarkConfig,
    BenchmarkSummary,
    BenchmarkThresholds,
    DashboardStats,
)
from call_analytics.utils.labels import LabelResolver, resolve_label
from call_analytics.utils.numbers import round_int, safe_divide


def classify_cohort(value: float, thresholds: BenchmarkThresholds) -> Cohort:
    """Pure three-tier classification of one value."""
    if value >= thresholds.top:
        return Cohort.TOP
    if value >= thresholds.average:
        return Cohort.AVERAGE
    return Cohort.BOTTOM


def _summary(
    key: str,
    value: float,
    percentile: int,
    thresholds: BenchmarkThresholds,
    resolver: Optional[LabelResolver],
) -> BenchmarkSummary:
    cohort = classify_cohort(value, thresholds)
    return BenchmarkSummary(
        metric=resolve_label(f"benchmarks.{key}", resolver),
        percentile=percentile,
        cohort=cohort,
        message=resolve_label(f"benchmarks.{key}.{cohort.value}", resolver),
    )


def compute_benchmarks(
    stats: DashboardStats,
    config: Optional[BenchmarkConfig] = None,
    resolver: Optional[LabelResolver] = None,
) -> List[BenchmarkSummary]:
    """Benchmark summaries for resolution rate, handle time and tickets per call."""
    config = config or BenchmarkConfig()

    resolution_rate = safe_divide(stats.resolvedTickets, stats.totalTickets)
    tickets_per_call = safe_divide(stats.totalTickets, stats.totalCalls)

    return [
        _summary(
            "resolutionRate",
            resolution_rate,
            round_int(resolution_rate * 100),
            config.resolutionRate,
            resolver,
        ),
        _summary(
            "avgHandleTime",
            stats.avgCallDuration,
            stats.avgCallDuration,
            config.avgHandleTimeSeconds,
            resolver,
        ),
        _summary(
            "ticketsPerCall",
            tickets_per_call,
            round_int(tickets_per_call * 100),
            config.ticketsPerCall,
            resolver,
        ),
    ]
