"""
FastAPI application entry point for the Call Analytics reporting API.

This module configures logging and CORS, registers the reports router, and
manages the asyncpg pool lifecycle. The reporting engine itself lives in
call_analytics.services and is usable without the HTTP layer.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from call_analytics import __version__
from call_analytics.api import api_router
from call_analytics.core.config import get_settings
from call_analytics.core.database import init_db, close_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for startup and shutdown.

    On startup the database pool is created; a failure is logged and the
    pool is created lazily on the first report request instead.
    On shutdown the pool is closed.
    """
    logger.info("Call Analytics API starting")
    try:
        await init_db()
        logger.info("Database connection pool initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")

    yield

    logger.info("Call Analytics API shutting down")
    try:
        await close_db()
    except Exception as e:
        logger.error(f"Error closing database pool: {e}")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    application = FastAPI(
        title="Call Analytics API",
        version=__version__,
        description=(
            "Reporting API for multi-tenant call centers. Turns raw call and "
            "ticket records into statistics, period comparisons, heatmaps, "
            "economic impact, benchmarks and prioritized insights."
        ),
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(api_router)

    @application.get("/health")
    async def health_check():
        """Health check endpoint for monitoring and load balancer probes."""
        return {"status": "healthy"}

    @application.get("/")
    async def root():
        """Root endpoint providing API information."""
        return {
            "name": "Call Analytics API",
            "version": __version__,
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    return application


app = create_app()


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "call_analytics.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
