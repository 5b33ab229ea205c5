"""
FastAPI router module for analytics reports.

Implements:
- GET /reports/tenants: configured tenant keys and their report options
- GET /reports/{tenant}: full AnalyticsReport for a date range

Query Parameters (GET /reports/{tenant}):
- from / to: reporting window (ISO datetimes). When either is missing the
  window is the last `defaultRangeDays` days ending today.
- compare_from / compare_to: comparison window. When either is missing the
  window of the same length immediately before the reporting window is used.
- mode: hourly | daily; auto-selected from the range span when omitted.

Error Mapping:
- unknown tenant -> 404
- invalid range (start after end) -> 422
- record source failure -> 502 with a single message; no partial report
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from call_analytics.core.dependencies import PoolDep, SettingsDep
from call_analytics.models.enums import TemporalMode
from call_analytics.models.schemas import AnalyticsReport, DateRange
from call_analytics.services.record_fetcher import RecordFetchError
from call_analytics.services.reporting import generate_report, previous_range_for, sanitize_range


logger = logging.getLogger(__name__)


# =============================================================================
# Local Pydantic Models for API Responses
# =============================================================================

class TenantItem(BaseModel):
    """One configured tenant."""
    key: str
    name: str
    includeCost: bool
    includeScore: bool


class TenantListResponse(BaseModel):
    """Response model for the tenant list endpoint."""
    tenants: List[TenantItem] = Field(default_factory=list)


# =============================================================================
# Router Definition
# =============================================================================

router = APIRouter()


# =============================================================================
# Endpoint Implementations
# =============================================================================


@router.get("/tenants", response_model=TenantListResponse)
async def list_tenants(settings: SettingsDep) -> TenantListResponse:
    """List the tenants a report can be requested for."""
    return TenantListResponse(tenants=[
        TenantItem(
            key=key,
            name=profile.name,
            includeCost=profile.includeCost,
            includeScore=profile.includeScore,
        )
        for key, profile in settings.tenants.items()
    ])


@router.get("/{tenant}", response_model=AnalyticsReport)
async def get_report(
    tenant: str,
    settings: SettingsDep,
    pool: PoolDep,
    start: Optional[datetime] = Query(default=None, alias="from", description="Range start"),
    end: Optional[datetime] = Query(default=None, alias="to", description="Range end"),
    compare_from: Optional[datetime] = Query(default=None, description="Comparison range start"),
    compare_to: Optional[datetime] = Query(default=None, description="Comparison range end"),
    mode: Optional[TemporalMode] = Query(default=None, description="hourly or daily"),
) -> AnalyticsReport:
    """
    Compute the analytics report of one tenant.

    Args:
        tenant: Tenant key from settings.tenants
        start / end: Reporting window
        compare_from / compare_to: Comparison window
        mode: Forced temporal mode

    Returns:
        AnalyticsReport

    Raises:
        HTTPException(404): Unknown tenant
        HTTPException(422): Invalid date range
        HTTPException(502): Record source failure
    """
    profile = settings.tenants.get(tenant)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Unknown tenant: {tenant}")

    try:
        date_range = sanitize_range(start, end, settings.reporting.defaultRangeDays)
        if compare_from is not None and compare_to is not None:
            comparison_range = DateRange(start=compare_from, end=compare_to)
        else:
            comparison_range = previous_range_for(date_range)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid date range: {e}")

    try:
        report = await generate_report(
            pool,
            tenant,
            profile,
            date_range,
            comparison_range,
            config=settings.reporting,
            mode=mode,
            page_size=settings.fetch_page_size,
        )
    except RecordFetchError:
        logger.exception(f"Record fetch failed for tenant {tenant}")
        raise HTTPException(status_code=502, detail="Failed to load report data")

    logger.info(f"Served report for {tenant} ({len(report.metrics)} metrics)")
    return report
