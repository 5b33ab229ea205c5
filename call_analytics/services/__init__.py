"""
Reporting Services Module

This module contains the analytics and reporting engine. Every aggregation
service is a pure function of its inputs; only record_fetcher performs I/O.

Services:
- record_fetcher: Paginated call/ticket retrieval (asyncpg)
- stats_summary: DashboardStats per period
- call_analysis: Answered/missed, business hours, response buckets, channels
- ticket_analysis: Status normalization, service mapping, ticket rollups
- temporal: Dense volume series, peaks, moving average, heatmap
- comparison: Period-over-period deltas
- economics: Economic impact model
- benchmarks: Cohort classification
- metrics: Formatted report metrics
- insights: Insight and priority generation
- reporting: Report orchestration

All services are consumed by the API layer (call_analytics/api/).
"""

# =============================================================================
# Record Fetcher Exports
# =============================================================================

from call_analytics.services.record_fetcher import (
    RecordFetchError,
    PeriodRecords,
    fetch_all_records,
    fetch_period_records,
    parse_call_rows,
    parse_ticket_rows,
    validate_identifier,
)

# =============================================================================
# Comparison Exports
# =============================================================================

from call_analytics.services.comparison import (
    calculate_delta,
    invert_trend,
)

# =============================================================================
# Ticket Analysis Exports
# =============================================================================

from call_analytics.services.ticket_analysis import (
    CLOSED_STATUS_KEYWORDS,
    IN_PROGRESS_STATUS_KEYWORDS,
    STATUS_RULES,
    EXACT_SERVICE_MATCHES,
    SERVICE_CATEGORIES,
    normalize_status,
    is_resolved_status,
    map_service_category,
    filter_tickets,
    analyze_tickets,
    build_ticket_types,
)

# =============================================================================
# Stats / Call Analysis Exports
# =============================================================================

from call_analytics.services.stats_summary import summarize_stats
from call_analytics.services.call_analysis import (
    CallAnalysis,
    RESPONSE_BUCKETS,
    analyze_calls,
    build_call_performance,
    is_within_business_hours,
)

# =============================================================================
# Temporal Aggregation Exports
# =============================================================================

from call_analytics.services.temporal import (
    select_mode,
    build_volume_series,
    peak_threshold,
    mark_peaks,
    build_trend_points,
    with_moving_average,
    build_heatmap,
    fill_heatmap_grid,
)

# =============================================================================
# Economics / Benchmarks / Metrics / Insights Exports
# =============================================================================

from call_analytics.services.economics import compute_economic_summary
from call_analytics.services.benchmarks import classify_cohort, compute_benchmarks
from call_analytics.services.metrics import INVERTED_METRICS, build_report_metrics
from call_analytics.services.insights import build_priorities, generate_insights

# =============================================================================
# Report Orchestration Exports
# =============================================================================

from call_analytics.services.reporting import (
    build_analytics_report,
    generate_report,
    previous_range_for,
    sanitize_range,
)


__all__ = [
    # ----- Record Fetcher -----
    'RecordFetchError',
    'PeriodRecords',
    'fetch_all_records',
    'fetch_period_records',
    'parse_call_rows',
    'parse_ticket_rows',
    'validate_identifier',
    # ----- Comparison -----
    'calculate_delta',
    'invert_trend',
    # ----- Ticket Analysis -----
    'CLOSED_STATUS_KEYWORDS',
    'IN_PROGRESS_STATUS_KEYWORDS',
    'STATUS_RULES',
    'EXACT_SERVICE_MATCHES',
    'SERVICE_CATEGORIES',
    'normalize_status',
    'is_resolved_status',
    'map_service_category',
    'filter_tickets',
    'analyze_tickets',
    'build_ticket_types',
    # ----- Stats / Calls -----
    'summarize_stats',
    'CallAnalysis',
    'RESPONSE_BUCKETS',
    'analyze_calls',
    'build_call_performance',
    'is_within_business_hours',
    # ----- Temporal -----
    'select_mode',
    'build_volume_series',
    'peak_threshold',
    'mark_peaks',
    'build_trend_points',
    'with_moving_average',
    'build_heatmap',
    'fill_heatmap_grid',
    # ----- Economics / Benchmarks / Metrics / Insights -----
    'compute_economic_summary',
    'classify_cohort',
    'compute_benchmarks',
    'INVERTED_METRICS',
    'build_report_metrics',
    'build_priorities',
    'generate_insights',
    # ----- Orchestration -----
    'build_analytics_report',
    'generate_report',
    'previous_range_for',
    'sanitize_range',
]
