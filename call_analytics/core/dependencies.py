"""
FastAPI dependency injection for the reporting API.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- get_record_pool: Returns the asyncpg pool used to fetch tenant records
- SettingsDep / PoolDep: Annotated aliases for endpoint signatures

Both are thin wrappers so tests can swap them through
app.dependency_overrides:

    app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    app.dependency_overrides[get_record_pool] = lambda: fake_pool
"""

from typing import Annotated

from asyncpg import Pool
from fastapi import Depends

from call_analytics.core.config import Settings, get_settings
from call_analytics.core.database import get_db_pool


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """Return the Settings singleton instance."""
    return get_settings()


# =============================================================================
# Database Pool Dependency
# =============================================================================

async def get_record_pool() -> Pool:
    """
    Return the shared connection pool.

    The four period queries run concurrently through pool.fetch, so endpoints
    receive the pool rather than a single connection.
    """
    return await get_db_pool()


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

PoolDep = Annotated[Pool, Depends(get_record_pool)]
