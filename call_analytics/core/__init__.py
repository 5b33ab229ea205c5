"""
Core infrastructure package for the reporting API.

Provides:
- Configuration management via pydantic-settings
- Async PostgreSQL connectivity via asyncpg
- FastAPI dependency injection utilities

Usage:
    from call_analytics.core import get_settings, init_db, close_db, SettingsDep
"""

# =============================================================================
# Re-exports from call_analytics.core.config
# =============================================================================
from call_analytics.core.config import Settings, get_settings

# =============================================================================
# Re-exports from call_analytics.core.database
# =============================================================================
from call_analytics.core.database import init_db, close_db, get_db_pool

# =============================================================================
# Re-exports from call_analytics.core.dependencies
# =============================================================================
from call_analytics.core.dependencies import (
    get_record_pool,
    get_settings_dependency,
    SettingsDep,
    PoolDep,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Database pool lifecycle (from database.py)
    'init_db',
    'close_db',
    'get_db_pool',
    # FastAPI dependency injection (from dependencies.py)
    'get_record_pool',
    'get_settings_dependency',
    'SettingsDep',
    'PoolDep',
]
