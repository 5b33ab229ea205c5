"""
Async PostgreSQL connection pool for the tenant call/ticket tables.

The reporting engine reads call logs and tickets from per-tenant tables. All
reads go through a single asyncpg pool owned by this module.

Key Components:
- Global connection pool singleton (_pool)
- init_db(): Initialize the pool at application startup
- get_db_pool(): Get the pool instance (initializes if needed)
- close_db(): Gracefully close the pool at application shutdown

Pool sizing and query timeout come from Settings
(db_pool_min_size, db_pool_max_size, db_command_timeout).

Usage:
    # At application startup (in FastAPI lifespan)
    await init_db()

    # In services
    pool = await get_db_pool()
    async with pool.acquire() as conn:
        rows = await conn.fetch("SELECT id, created_at FROM call_logs_salutdental")

    # At application shutdown
    await close_db()
"""

import logging
from typing import Optional

import asyncpg
from asyncpg import Pool

from call_analytics.core.config import get_settings

logger = logging.getLogger(__name__)


# =============================================================================
# Global Pool Singleton
# =============================================================================

# None until init_db() is called; shared across all async tasks
_pool: Optional[Pool] = None


# =============================================================================
# Pool Lifecycle Functions
# =============================================================================

async def init_db() -> Pool:
    """
    Initialize the database connection pool.

    Idempotent: returns the existing pool when already initialized.

    Returns:
        Pool: The asyncpg connection pool instance.

    Raises:
        asyncpg.PostgresError: If connection to the database fails.
        OSError: If the database host is unreachable.
    """
    global _pool

    if _pool is None:
        settings = get_settings()
        _pool = await asyncpg.create_pool(
            dsn=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )
        logger.info(
            f"Database pool created (min={settings.db_pool_min_size}, "
            f"max={settings.db_pool_max_size})"
        )

    return _pool


async def get_db_pool() -> Pool:
    """
    Get the database connection pool, initializing if needed.

    Prefer calling init_db() at startup; lazy initialization adds latency to
    the first request.
    """
    if _pool is None:
        await init_db()

    assert _pool is not None, "Pool should be initialized after init_db()"

    return _pool


async def close_db() -> None:
    """
    Close the database connection pool gracefully.

    Safe to call when the pool was never initialized. Subsequent calls to
    get_db_pool() create a new pool.
    """
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")
