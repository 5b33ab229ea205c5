"""
Package initialization file for call analytics models.

Re-exports all Pydantic schemas and enumerations so other modules can import
them from call_analytics.models directly.

Usage:
    from call_analytics.models import (
        RawCallRecord,
        DashboardStats,
        TrendDirection,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from call_analytics.models.enums import (
    Cohort,
    Impact,
    TemporalMode,
    TicketStatus,
    TrendDirection,
)


# =============================================================================
# Schemas
# =============================================================================

from call_analytics.models.schemas import (
    # -------------------------------------------------------------------------
    # Raw records (ingestion boundary)
    # -------------------------------------------------------------------------
    RawCallRecord,
    RawTicketRecord,
    DateRange,

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------
    EconomicsConfig,
    BenchmarkThresholds,
    BenchmarkConfig,
    BusinessHoursConfig,
    ReportingConfig,
    TenantProfile,

    # -------------------------------------------------------------------------
    # Statistics and metrics
    # -------------------------------------------------------------------------
    DashboardStats,
    TrendDelta,
    ReportMetric,

    # -------------------------------------------------------------------------
    # Temporal
    # -------------------------------------------------------------------------
    VolumeBucket,
    TrendPoint,
    HeatmapCell,

    # -------------------------------------------------------------------------
    # Calls and tickets
    # -------------------------------------------------------------------------
    ResponseBucket,
    ChannelSummary,
    CallPerformanceSummary,
    TicketStatusSummary,
    TicketServiceSummary,
    TicketAgentSummary,
    TicketTypeSlice,
    TicketPerformance,

    # -------------------------------------------------------------------------
    # Economics, benchmarks, priorities, report
    # -------------------------------------------------------------------------
    EconomicSummary,
    BenchmarkSummary,
    PriorityItem,
    AvailableFilters,
    AnalyticsReport,
)


__all__ = [
    # Enums
    "Cohort",
    "Impact",
    "TemporalMode",
    "TicketStatus",
    "TrendDirection",
    # Raw records
    "RawCallRecord",
    "RawTicketRecord",
    "DateRange",
    # Configuration
    "EconomicsConfig",
    "BenchmarkThresholds",
    "BenchmarkConfig",
    "BusinessHoursConfig",
    "ReportingConfig",
    "TenantProfile",
    # Statistics and metrics
    "DashboardStats",
    "TrendDelta",
    "ReportMetric",
    # Temporal
    "VolumeBucket",
    "TrendPoint",
    "HeatmapCell",
    # Calls and tickets
    "ResponseBucket",
    "ChannelSummary",
    "CallPerformanceSummary",
    "TicketStatusSummary",
    "TicketServiceSummary",
    "TicketAgentSummary",
    "TicketTypeSlice",
    "TicketPerformance",
    # Economics, benchmarks, priorities, report
    "EconomicSummary",
    "BenchmarkSummary",
    "PriorityItem",
    "AvailableFilters",
    "AnalyticsReport",
]
