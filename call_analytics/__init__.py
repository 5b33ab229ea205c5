"""
Call Analytics Package.

Multi-tenant call-center reporting engine with a FastAPI service layer.
Turns raw call and ticket records for a date range into normalized
statistics, period-over-period deltas, service/ticket breakdowns, temporal
heatmaps, an economic-impact model, benchmark cohorts and ranked insights.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, database pool, and dependencies
    - models: Pydantic schemas and enums
    - services: Reporting engine and record fetcher
    - utils: Numeric parsing, formatting, filters and labels
"""

__version__ = "1.0.0"
