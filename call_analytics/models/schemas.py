"""
Pydantic models for the call analytics reporting engine.

This module provides type-safe validation and serialization for:
- raw call/ticket rows at the ingestion boundary (coerced, immutable)
- reporting configuration (cost model, benchmarks, business hours, tenants)
- every derived entity the engine returns (stats, metrics, trend points,
  heatmap cells, ticket rollups, economic summary, benchmarks, priorities)
- the complete AnalyticsReport output contract

Output models use camelCase field names because they are consumed as-is by
dashboard and export collaborators.

All models use Pydantic v2 syntax.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from call_analytics.models.enums import (
    Cohort,
    Impact,
    TemporalMode,
    TicketStatus,
    TrendDirection,
)
from call_analytics.utils.filters import DEFAULT_EXCLUDED_TICKET_KEYWORDS
from call_analytics.utils.numbers import parse_optional_number


# =============================================================================
# Raw Records (ingestion boundary)
# =============================================================================


class RawCallRecord(BaseModel):
    """
    One call row as fetched from a tenant's call log table.

    Numeric fields are coerced on construction: comma decimals are accepted,
    unparseable values become 0.0 and missing values stay None. The record is
    frozen; the engine never mutates source snapshots.

    Accepts both the engine field names and the source column names
    (call_duration_seconds, call_cost, phone_id).
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[Union[int, str]] = None
    created_at: datetime
    duration_seconds: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("duration_seconds", "call_duration_seconds"),
    )
    cost: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("cost", "call_cost"),
    )
    score: Optional[float] = Field(
        default=None,
        description="Caller satisfaction score (0-10) where the tenant records one",
    )
    channel_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("channel_id", "phone_id"),
    )

    @field_validator("duration_seconds", "cost", "score", mode="before")
    @classmethod
    def _coerce_number(cls, value):
        return parse_optional_number(value)

    @field_validator("channel_id", mode="before")
    @classmethod
    def _coerce_channel(cls, value):
        if value is None:
            return None
        return str(value)

    @property
    def duration(self) -> float:
        """Parsed duration in seconds, 0.0 when unknown."""
        return self.duration_seconds or 0.0


class RawTicketRecord(BaseModel):
    """
    One ticket row as fetched from a tenant's ticket table.

    `assignee` also accepts the source column name `user_name`.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[Union[int, str]] = None
    created_at: datetime
    ticket_type: Optional[str] = None
    ticket_status: Optional[str] = None
    assignee: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("assignee", "user_name"),
    )


class DateRange(BaseModel):
    """
    A closed reporting period [start, end].
    """
    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="Inclusive start of the period")
    end: datetime = Field(..., description="Inclusive end of the period")

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("date range bounds must both be timezone-aware or both naive")
        if self.start > self.end:
            raise ValueError("date range start must not be after end")
        return self

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


# =============================================================================
# Configuration Models
# =============================================================================


class EconomicsConfig(BaseModel):
    """
    Cost model used by the economic impact computation.

    All monetary values are in euros.
    """
    missedCallCost: float = Field(default=35.0, ge=0.0, description="Cost of one unanswered call")
    automationCoverage: float = Field(
        default=0.4, ge=0.0, le=1.0,
        description="Share of calls handled by the virtual agent",
    )
    automationSavingsPerCall: float = Field(default=18.0, ge=0.0)
    avgTicketValue: float = Field(default=150.0, ge=0.0)
    conversionRate: float = Field(default=0.3, ge=0.0, le=1.0)
    hourlyRate: float = Field(default=20.0, ge=0.0, description="Loaded hourly cost of an agent")


class BenchmarkThresholds(BaseModel):
    """
    Three-tier cutoffs for one benchmark metric.

    The cutoffs are lower bounds: top if value >= top, average if
    value >= average, bottom otherwise.
    """
    top: float
    average: float
    bottom: float


class BenchmarkConfig(BaseModel):
    """Benchmark thresholds per metric."""
    resolutionRate: BenchmarkThresholds = Field(
        default_factory=lambda: BenchmarkThresholds(top=0.85, average=0.72, bottom=0.58)
    )
    avgHandleTimeSeconds: BenchmarkThresholds = Field(
        default_factory=lambda: BenchmarkThresholds(top=240, average=360, bottom=480)
    )
    ticketsPerCall: BenchmarkThresholds = Field(
        default_factory=lambda: BenchmarkThresholds(top=0.35, average=0.25, bottom=0.15)
    )


class BusinessHoursConfig(BaseModel):
    """
    Attended hours window.

    weekdays use Python numbering (Monday=0). The window is
    [startHour, endHour). When timezone is set, timezone-aware timestamps are
    converted to it before checking; naive timestamps are taken as local.
    """
    weekdays: List[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4])
    startHour: int = Field(default=9, ge=0, le=23)
    endHour: int = Field(default=17, ge=1, le=24)
    timezone: Optional[str] = Field(default=None, description="IANA zone, e.g. Europe/Madrid")

    @field_validator("weekdays")
    @classmethod
    def _check_weekdays(cls, value: List[int]) -> List[int]:
        for day in value:
            if day < 0 or day > 6:
                raise ValueError(f"weekday out of range: {day}")
        return value


class ReportingConfig(BaseModel):
    """
    Versionable reporting configuration, tunable per tenant without code changes.
    """
    movingAverageWindow: int = Field(default=3, ge=1)
    defaultRangeDays: int = Field(default=30, ge=1)
    economics: EconomicsConfig = Field(default_factory=EconomicsConfig)
    benchmarks: BenchmarkConfig = Field(default_factory=BenchmarkConfig)
    businessHours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    excludedTicketKeywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_TICKET_KEYWORDS)
    )


class TenantProfile(BaseModel):
    """
    Source tables and reporting options of one call-center tenant.
    """
    name: str
    callsTable: str
    ticketsTable: str
    callColumns: List[str] = Field(
        default_factory=lambda: ["id", "created_at", "call_duration_seconds", "phone_id"]
    )
    ticketColumns: List[str] = Field(
        default_factory=lambda: ["id", "created_at", "ticket_type", "ticket_status", "user_name"]
    )
    includeCost: bool = True
    includeScore: bool = False
    excludedTicketKeywords: Optional[List[str]] = Field(
        default=None,
        description="Overrides ReportingConfig.excludedTicketKeywords for this tenant",
    )


# =============================================================================
# Statistics Models
# =============================================================================


class DashboardStats(BaseModel):
    """
    Aggregate statistics for one reporting period.

    Invariants:
    - openTickets + resolvedTickets == totalTickets (after exclusion filtering)
    - avgCallDuration == round(totalCallTime / calls with duration > 0), or 0
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "totalCalls": 10,
                "avgCallDuration": 120,
                "totalCallTime": 840,
                "totalCost": 12.5,
                "totalTickets": 4,
                "openTickets": 1,
                "resolvedTickets": 3,
                "avgScore": None,
            }
        }
    )

    totalCalls: int = Field(default=0, ge=0)
    avgCallDuration: int = Field(default=0, ge=0, description="Seconds")
    totalCallTime: int = Field(default=0, ge=0, description="Seconds")
    totalCost: float = Field(default=0.0, ge=0.0)
    totalTickets: int = Field(default=0, ge=0)
    openTickets: int = Field(default=0, ge=0)
    resolvedTickets: int = Field(default=0, ge=0)
    avgScore: Optional[float] = None


class TrendDelta(BaseModel):
    """Period-over-period change of one value."""
    delta: Optional[float] = Field(default=None, description="Percentage change, one decimal")
    trend: TrendDirection = TrendDirection.FLAT


class ReportMetric(BaseModel):
    """
    One labeled, formatted KPI ready for display or export.
    """
    id: str
    label: str
    value: str
    delta: Optional[float] = None
    deltaLabel: Optional[str] = None
    trend: TrendDirection = TrendDirection.FLAT
    hint: Optional[str] = None


# =============================================================================
# Temporal Models
# =============================================================================


class VolumeBucket(BaseModel):
    """One hour or one day of call volume in a dense series."""
    label: str
    start: datetime
    calls: int = Field(default=0, ge=0)
    totalDuration: float = Field(default=0.0, ge=0.0)
    isPeak: bool = False
    mode: TemporalMode


class TrendPoint(BaseModel):
    """Chronological trend point with optional smoothing."""
    label: str
    calls: int = Field(default=0, ge=0)
    movingAverage: Optional[float] = None
    isPeak: bool = False


class HeatmapCell(BaseModel):
    """Calls aggregated by weekday and hour of day across a range."""
    day: str
    hour: int = Field(..., ge=0, le=23)
    calls: int = Field(default=0, ge=0)
    avgDuration: int = Field(default=0, ge=0)
    isPeak: bool = False


# =============================================================================
# Call Performance Models
# =============================================================================


class ResponseBucket(BaseModel):
    """Share of calls in one duration band."""
    label: str
    count: int = 0
    percentage: float = 0.0


class ChannelSummary(BaseModel):
    """Calls and average duration for one caller channel."""
    channel: str
    calls: int = 0
    avgDuration: int = 0


class CallPerformanceSummary(BaseModel):
    """
    Answered/missed split, business-hours coverage and channel breakdown.

    Rates are one-decimal percentages (0-100).
    """
    total: int = 0
    answered: int = 0
    missed: int = 0
    answeredRate: float = 0.0
    answeredDelta: TrendDelta = Field(default_factory=TrendDelta)
    missedDelta: TrendDelta = Field(default_factory=TrendDelta)
    answeredWithinHours: int = 0
    answeredOutsideHours: int = 0
    withinHoursRate: float = 0.0
    outsideHoursRate: float = 0.0
    responseDistribution: List[ResponseBucket] = Field(default_factory=list)
    channels: List[ChannelSummary] = Field(default_factory=list)


# =============================================================================
# Ticket Performance Models
# =============================================================================


class TicketStatusSummary(BaseModel):
    """Tickets in one normalized status bucket."""
    status: TicketStatus
    label: str
    count: int = 0
    percentage: float = 0.0
    delta: TrendDelta = Field(default_factory=TrendDelta)


class TicketServiceSummary(BaseModel):
    """
    Tickets of one service category with a nested status split.

    closedPercentage and pendingPercentage are relative to this service's own
    count; percentage is relative to all tickets.
    """
    service: str
    count: int = 0
    percentage: float = 0.0
    closedCount: int = 0
    openCount: int = 0
    inProgressCount: int = 0
    closedPercentage: float = 0.0
    pendingPercentage: float = 0.0


class TicketAgentSummary(BaseModel):
    """Ticket load of one assignee."""
    agent: str
    tickets: int = 0
    resolved: int = 0
    open: int = 0


class TicketTypeSlice(BaseModel):
    """Raw ticket type distribution entry."""
    label: str
    value: int = 0
    percentage: float = 0.0


class TicketPerformance(BaseModel):
    """All ticket rollups of one period."""
    statuses: List[TicketStatusSummary] = Field(default_factory=list)
    services: List[TicketServiceSummary] = Field(default_factory=list)
    agents: List[TicketAgentSummary] = Field(default_factory=list)


# =============================================================================
# Economic / Benchmark / Priority Models
# =============================================================================


class EconomicSummary(BaseModel):
    """
    Economic impact of the period.

    netImpact = automationSavings + humanSavings + recoveredRevenue - missedCallCost
    roi = netImpact / missedCallCost when missedCallCost > 0, else None
    """
    missedCalls: int = 0
    missedCallCost: int = 0
    automationSavings: int = 0
    humanSavings: int = 0
    recoveredRevenue: int = 0
    netImpact: int = 0
    roi: Optional[float] = None


class BenchmarkSummary(BaseModel):
    """Cohort placement of one metric."""
    metric: str
    percentile: int
    cohort: Cohort
    message: str


class PriorityItem(BaseModel):
    """Generated action item."""
    id: str
    impact: Impact
    title: str
    description: str
    referenceMetric: Optional[str] = None


class AvailableFilters(BaseModel):
    """Distinct segment values present in the period, for UI filters."""
    channels: List[str] = Field(default_factory=list)
    services: List[str] = Field(default_factory=list)
    agents: List[str] = Field(default_factory=list)


# =============================================================================
# Report Output Contract
# =============================================================================


class AnalyticsReport(BaseModel):
    """
    Complete output of one report computation.

    Plain data only; rendering and export collaborators consume it directly.
    """
    tenant: Optional[str] = None
    dateRange: DateRange
    comparisonRange: DateRange
    mode: TemporalMode
    includeScore: bool = False
    stats: DashboardStats
    comparisonStats: DashboardStats
    metrics: List[ReportMetric] = Field(default_factory=list)
    volume: List[VolumeBucket] = Field(default_factory=list)
    trend: List[TrendPoint] = Field(default_factory=list)
    heatmap: List[HeatmapCell] = Field(default_factory=list)
    callPerformance: CallPerformanceSummary
    ticketPerformance: TicketPerformance
    ticketTypes: List[TicketTypeSlice] = Field(default_factory=list)
    availableFilters: AvailableFilters = Field(default_factory=AvailableFilters)
    economicSummary: EconomicSummary
    benchmarks: List[BenchmarkSummary] = Field(default_factory=list)
    priorities: List[PriorityItem] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)
    generatedAt: datetime = Field(default_factory=datetime.now)


__all__ = [
    "RawCallRecord",
    "RawTicketRecord",
    "DateRange",
    "EconomicsConfig",
    "BenchmarkThresholds",
    "BenchmarkConfig",
    "BusinessHoursConfig",
    "ReportingConfig",
    "TenantProfile",
    "DashboardStats",
    "TrendDelta",
    "ReportMetric",
    "VolumeBucket",
    "TrendPoint",
    "HeatmapCell",
    "ResponseBucket",
    "ChannelSummary",
    "CallPerformanceSummary",
    "TicketStatusSummary",
    "TicketServiceSummary",
    "TicketAgentSummary",
    "TicketTypeSlice",
    "TicketPerformance",
    "EconomicSummary",
    "BenchmarkSummary",
    "PriorityItem",
    "AvailableFilters",
    "AnalyticsReport",
]
