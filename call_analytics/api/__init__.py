"""
API package initialization.

This package contains FastAPI router modules for the reporting service:
- reports: Tenant list and analytics report endpoints
"""

from fastapi import APIRouter

from call_analytics.api.reports import router as reports_router

# Create main API router
api_router = APIRouter()

api_router.include_router(reports_router, prefix="/reports", tags=["reports"])

__all__ = [
    "api_router",
    "reports_router",
]
