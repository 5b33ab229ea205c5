"""
Report orchestration: turn one tenant's raw records into an AnalyticsReport.

Pipeline (pure, per period, no shared accumulators):
    1. summarize_stats            current and comparison DashboardStats
    2. analyze_calls              answered/missed, business hours, channels
    3. analyze_tickets            status, service and agent rollups
    4. build_volume_series        dense hourly/daily series with peaks
       -> build_trend_points -> with_moving_average
    5. build_heatmap              weekday x hour grid (filled to 7 x 24)
    6. compute_economic_summary   cost model
    7. compute_benchmarks         cohorts
    8. build_report_metrics       formatted KPIs
    9. generate_insights / build_priorities

generate_report adds the async fetch in front. A fetch failure propagates as
RecordFetchError; no partial report is ever returned.

Period Helpers:
    - sanitize_range: explicit range, or the last N days ending today 23:59:59.999999
    - previous_range_for: window of the same length ending the microsecond
      before the current one, widened to whole days
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from asyncpg import Pool

from call_analytics.models.enums import TemporalMode
from call_analytics.models.schemas import (
    AnalyticsReport,
    AvailableFilters,
    DateRange,
    ReportingConfig,
    TenantProfile,
)
from call_analytics.services.benchmarks import compute_benchmarks
from call_analytics.services.call_analysis import analyze_calls, build_call_performance
from call_analytics.services.economics import compute_economic_summary
from call_analytics.services.insights import build_priorities, generate_insights
from call_analytics.services.metrics import build_report_metrics
from call_analytics.services.record_fetcher import (
    DEFAULT_PAGE_SIZE,
    PeriodRecords,
    fetch_period_records,
)
from call_analytics.services.stats_summary import summarize_stats
from call_analytics.services.temporal import (
    build_heatmap,
    build_trend_points,
    build_volume_series,
    fill_heatmap_grid,
    select_mode,
    with_moving_average,
)
from call_analytics.services.ticket_analysis import analyze_tickets, build_ticket_types
from call_analytics.utils.dates import end_of_day, start_of_day
from call_analytics.utils.labels import LabelResolver

logger = logging.getLogger(__name__)


# =============================================================================
# Period Helpers
# =============================================================================


def sanitize_range(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    default_days: int = 30,
    now: Optional[datetime] = None,
) -> DateRange:
    """
    Build the reporting window.

    When either bound is missing, the window is the last `default_days`
    calendar days ending today at 23:59:59.999999.

    Raises:
        ValueError: If start is after end.
    """
    if start is None or end is None:
        today = now or datetime.now()
        end = end_of_day(today)
        start = start_of_day(today - timedelta(days=default_days - 1))
    return DateRange(start=start, end=end)


def previous_range_for(date_range: DateRange) -> DateRange:
    """
    Comparison window of the same length immediately before `date_range`.

    Example:
        1-30 June 23:59:59.999999 -> 2 May 00:00 to 31 May 23:59:59.999999
    """
    duration = date_range.end - date_range.start
    previous_end = end_of_day(date_range.start - timedelta(microseconds=1))
    previous_start = start_of_day(previous_end - duration)
    return DateRange(start=previous_start, end=previous_end)


# =============================================================================
# Report Assembly
# =============================================================================


def build_analytics_report(
    records: PeriodRecords,
    date_range: DateRange,
    comparison_range: DateRange,
    config: Optional[ReportingConfig] = None,
    profile: Optional[TenantProfile] = None,
    tenant: Optional[str] = None,
    mode: Optional[TemporalMode] = None,
    resolver: Optional[LabelResolver] = None,
) -> AnalyticsReport:
    """
    Compute a full report from already fetched records.

    Args:
        records: Current and comparison calls/tickets
        date_range: Reporting window
        comparison_range: Comparison window
        config: Reporting configuration; defaults when None
        profile: Tenant profile (cost/score flags, keyword override)
        tenant: Tenant key echoed in the report
        mode: Forced temporal mode; auto-selected when None
        resolver: Optional label resolver

    Returns:
        AnalyticsReport
    """
    config = config or ReportingConfig()

    include_cost = profile.includeCost if profile is not None else True
    include_score = profile.includeScore if profile is not None else False
    excluded = config.excludedTicketKeywords
    if profile is not None and profile.excludedTicketKeywords is not None:
        excluded = profile.excludedTicketKeywords
    timezone = config.businessHours.timezone

    stats = summarize_stats(records.current_calls, records.current_tickets, excluded, include_score)
    comparison_stats = summarize_stats(
        records.previous_calls, records.previous_tickets, excluded, include_score
    )

    current_calls = analyze_calls(records.current_calls, config.businessHours, resolver)
    previous_calls = analyze_calls(records.previous_calls, config.businessHours, resolver)
    call_performance = build_call_performance(current_calls, previous_calls)

    ticket_performance = analyze_tickets(
        records.current_tickets, records.previous_tickets, excluded, resolver
    )
    ticket_types = build_ticket_types(records.current_tickets, excluded, resolver)

    selected_mode = select_mode(date_range, mode)
    volume = build_volume_series(records.current_calls, date_range, selected_mode, timezone)
    trend = with_moving_average(build_trend_points(volume), config.movingAverageWindow)
    heatmap = fill_heatmap_grid(build_heatmap(records.current_calls, timezone, resolver), resolver)

    economic = compute_economic_summary(stats, current_calls, previous_calls, config.economics)
    benchmarks = compute_benchmarks(stats, config.benchmarks, resolver)

    metrics = build_report_metrics(
        stats,
        previous=comparison_stats,
        include_cost=include_cost,
        include_score=include_score,
        call_performance=call_performance,
        economic=economic,
        resolver=resolver,
    )
    insights = generate_insights(
        stats, metrics, trend, ticket_performance, economic, include_score, resolver
    )
    priorities = build_priorities(ticket_performance, economic, resolver)

    available_filters = AvailableFilters(
        channels=[channel.channel for channel in call_performance.channels],
        services=[service.service for service in ticket_performance.services],
        agents=[agent.agent for agent in ticket_performance.agents],
    )

    logger.info(
        f"Report for {tenant or 'tenant'}: {stats.totalCalls} calls, "
        f"{stats.totalTickets} tickets, {len(volume)} {selected_mode.value} buckets, "
        f"{len(insights)} insights, {len(priorities)} priorities"
    )

    return AnalyticsReport(
        tenant=tenant,
        dateRange=date_range,
        comparisonRange=comparison_range,
        mode=selected_mode,
        includeScore=include_score,
        stats=stats,
        comparisonStats=comparison_stats,
        metrics=metrics,
        volume=volume,
        trend=trend,
        heatmap=heatmap,
        callPerformance=call_performance,
        ticketPerformance=ticket_performance,
        ticketTypes=ticket_types,
        availableFilters=available_filters,
        economicSummary=economic,
        benchmarks=benchmarks,
        priorities=priorities,
        insights=insights,
    )


async def generate_report(
    pool: Pool,
    tenant: str,
    profile: TenantProfile,
    date_range: DateRange,
    comparison_range: Optional[DateRange] = None,
    config: Optional[ReportingConfig] = None,
    mode: Optional[TemporalMode] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    resolver: Optional[LabelResolver] = None,
) -> AnalyticsReport:
    """
    Fetch a tenant's records for both periods and build the report.

    Raises:
        RecordFetchError: If the record source fails.
    """
    comparison_range = comparison_range or previous_range_for(date_range)
    logger.info(
        f"Generating report for {tenant}: {date_range.start.isoformat()} - "
        f"{date_range.end.isoformat()} (comparison from {comparison_range.start.isoformat()})"
    )

    records = await fetch_period_records(pool, profile, date_range, comparison_range, page_size)

    return build_analytics_report(
        records,
        date_range,
        comparison_range,
        config=config,
        profile=profile,
        tenant=tenant,
        mode=mode,
        resolver=resolver,
    )
