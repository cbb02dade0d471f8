"""
Health check endpoint.
"""

import time

import structlog
from fastapi import APIRouter, Depends

from creator_feed import __version__
from creator_feed.api.dependencies import get_database
from creator_feed.api.models import ComponentHealth, HealthResponse
from creator_feed.config.settings import get_settings
from creator_feed.storage.database import Database

router = APIRouter()
logger = structlog.get_logger(__name__)


async def _check_database(db: Database) -> ComponentHealth:
    """Check database connectivity and measure latency."""
    start = time.perf_counter()
    try:
        healthy = await db.health_check()
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="healthy" if healthy else "unhealthy",
            latency_ms=round(latency_ms, 2),
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.warning("Database health check failed", error=str(e))
        return ComponentHealth(
            status="unhealthy",
            latency_ms=round(latency_ms, 2),
            details={"error": str(e)},
        )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Check database connectivity and tweet provider configuration.",
)
async def health_check(db: Database = Depends(get_database)) -> HealthResponse:
    """
    Status logic:
    - unhealthy: database is down
    - healthy: all components operational

    A missing provider key never reaches here; startup refuses it.
    """
    settings = get_settings()

    db_health = await _check_database(db)
    provider_configured = settings.scraper_configured

    status = "unhealthy" if db_health.status == "unhealthy" else "healthy"

    return HealthResponse(
        status=status,
        provider=settings.scraper_provider,
        provider_configured=provider_configured,
        components={"database": db_health},
        version=__version__,
    )
