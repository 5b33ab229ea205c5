"""
Metric builder: the ordered, labeled and formatted KPI list of a report.

Order:
    totalCalls, totalTickets, avgHandleTime, totalCallTime,
    [answeredWithinHoursRate, answeredOutsideHoursRate]   (call performance given)
    resolutionRate, openTickets,
    [totalCost]                                           (cost tenants)
    [avgScore]                                            (score tenants)
    [missedCallCost, automationSavings, humanSavings,
     recoveredRevenue, netImpact]                         (economic summary given)
    ticketsPerCall

Formatting Contracts (es-ES):
    counts "12.345", currency "1.235 €", percentages "45,3 %",
    durations "1h 2m" from one hour upwards else "4 min 5s",
    ratios "0.35"

Trend Polarity:
    Deltas come from calculate_delta, which reports the raw direction. For
    the ids in INVERTED_METRICS a decrease is favorable, so the trend is
    inverted. The delta value itself is never inverted.
"""

from typing import List, Optional

from call_analytics.models.enums import TrendDirection
from call_analytics.models.schemas import (
    CallPerformanceSummary,
    DashboardStats,
    EconomicSummary,
    ReportMetric,
)
from call_analytics.services.comparison import calculate_delta, invert_trend
from call_analytics.utils.formatting import (
    format_count,
    format_currency,
    format_delta,
    format_duration,
    format_percent,
    format_ratio,
)
from call_analytics.utils.labels import LabelResolver, resolve_label
from call_analytics.utils.numbers import safe_divide


INVERTED_METRICS = frozenset({"avgHandleTime", "openTickets", "totalCost"})

# Business-hours coverage considered healthy (percent of answered calls)
WITHIN_HOURS_TARGET = 50.0
OUTSIDE_HOURS_TARGET = 20.0


def _compared_metric(
    metric_id: str,
    value: str,
    current: float,
    previous: Optional[float],
    resolver: Optional[LabelResolver],
    hint_key: Optional[str] = None,
) -> ReportMetric:
    comparison = calculate_delta(current, previous)
    trend = comparison.trend
    if metric_id in INVERTED_METRICS:
        trend = invert_trend(trend)
    return ReportMetric(
        id=metric_id,
        label=resolve_label(f"metrics.{metric_id}", resolver),
        value=value,
        delta=comparison.delta,
        deltaLabel=f"{format_delta(comparison.delta)}%" if comparison.delta is not None else None,
        trend=trend,
        hint=resolve_label(hint_key, resolver) if hint_key else None,
    )


def _static_metric(
    metric_id: str,
    value: str,
    trend: TrendDirection,
    resolver: Optional[LabelResolver],
    hint: Optional[str] = None,
) -> ReportMetric:
    return ReportMetric(
        id=metric_id,
        label=resolve_label(f"metrics.{metric_id}", resolver),
        value=value,
        trend=trend,
        hint=hint,
    )


def build_report_metrics(
    current: DashboardStats,
    previous: Optional[DashboardStats] = None,
    include_cost: bool = True,
    include_score: bool = False,
    call_performance: Optional[CallPerformanceSummary] = None,
    economic: Optional[EconomicSummary] = None,
    resolver: Optional[LabelResolver] = None,
) -> List[ReportMetric]:
    """
    Assemble the report metrics.

    Args:
        current: Stats of the reporting period
        previous: Stats of the comparison period; no deltas when None
        include_cost: Add totalCost (tenants recording call cost)
        include_score: Add avgScore (tenants recording satisfaction)
        call_performance: Adds the business-hours coverage metrics
        economic: Adds the economic impact metrics
        resolver: Optional label resolver

    Returns:
        Ordered list of ReportMetric.
    """
    metrics: List[ReportMetric] = []

    def prev(attribute: str) -> Optional[float]:
        return getattr(previous, attribute) if previous is not None else None

    metrics.append(_compared_metric(
        "totalCalls", format_count(current.totalCalls),
        current.totalCalls, prev("totalCalls"), resolver,
    ))
    metrics.append(_compared_metric(
        "totalTickets", format_count(current.totalTickets),
        current.totalTickets, prev("totalTickets"), resolver,
    ))
    metrics.append(_compared_metric(
        "avgHandleTime", format_duration(current.avgCallDuration),
        current.avgCallDuration, prev("avgCallDuration"), resolver,
    ))
    metrics.append(_compared_metric(
        "totalCallTime", format_duration(current.totalCallTime),
        current.totalCallTime, prev("totalCallTime"), resolver,
    ))

    if call_performance is not None:
        within = call_performance.withinHoursRate
        outside = call_performance.outsideHoursRate
        metrics.append(_static_metric(
            "answeredWithinHoursRate",
            format_percent(within / 100),
            TrendDirection.UP if within >= WITHIN_HOURS_TARGET else TrendDirection.DOWN,
            resolver,
        ))
        metrics.append(_static_metric(
            "answeredOutsideHoursRate",
            format_percent(outside / 100),
            TrendDirection.UP if outside >= OUTSIDE_HOURS_TARGET else TrendDirection.DOWN,
            resolver,
        ))

    resolution_rate = safe_divide(current.resolvedTickets, current.totalTickets)
    previous_resolution = (
        safe_divide(previous.resolvedTickets, previous.totalTickets) if previous is not None else None
    )
    metrics.append(_compared_metric(
        "resolutionRate", format_percent(resolution_rate),
        resolution_rate, previous_resolution, resolver, "hints.resolutionRate",
    ))

    metrics.append(_compared_metric(
        "openTickets", format_count(current.openTickets),
        current.openTickets, prev("openTickets"), resolver, "hints.openTickets",
    ))

    if include_cost:
        metrics.append(_compared_metric(
            "totalCost", format_currency(current.totalCost),
            current.totalCost, prev("totalCost"), resolver, "hints.totalCost",
        ))

    if include_score:
        score = current.avgScore or 0.0
        previous_score = (previous.avgScore or 0.0) if previous is not None else None
        metrics.append(_compared_metric(
            "avgScore", format_ratio(score),
            score, previous_score, resolver, "hints.avgScore",
        ))

    if economic is not None:
        metrics.append(_static_metric(
            "missedCallCost",
            format_currency(economic.missedCallCost),
            TrendDirection.DOWN if economic.missedCallCost > 0 else TrendDirection.FLAT,
            resolver,
            resolve_label("hints.missedCallCost", resolver, missed=economic.missedCalls),
        ))
        for metric_id in ("automationSavings", "humanSavings", "recoveredRevenue"):
            metrics.append(_static_metric(
                metric_id,
                format_currency(getattr(economic, metric_id)),
                TrendDirection.UP,
                resolver,
                resolve_label(f"hints.{metric_id}", resolver),
            ))
        metrics.append(_static_metric(
            "netImpact",
            format_currency(economic.netImpact),
            TrendDirection.UP if economic.netImpact >= 0 else TrendDirection.DOWN,
            resolver,
            resolve_label("hints.netImpact", resolver),
        ))

    tickets_per_call = safe_divide(current.totalTickets, current.totalCalls)
    previous_tickets_per_call = (
        safe_divide(previous.totalTickets, previous.totalCalls) if previous is not None else None
    )
    metrics.append(_compared_metric(
        "ticketsPerCall", format_ratio(tickets_per_call),
        tickets_per_call, previous_tickets_per_call, resolver, "hints.ticketsPerCall",
    ))

    return metrics
