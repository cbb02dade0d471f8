"""
Scheduled triggers: daily scrape and retention cleanup.

Both require `Authorization: Bearer <CRON_SECRET>`. Cleanup reports
failures with HTTP 200 and success=false so the scheduler does not
retry a sweep that is already logged.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import structlog

from creator_feed.api.auth import verify_cron_secret
from creator_feed.api.dependencies import (
    get_ingestion_config,
    get_ingestion_service,
    get_retention_sweeper,
)
from creator_feed.api.models import ErrorResponse, ScrapeRunResponse
from creator_feed.ingestion.config import IngestionConfig
from creator_feed.ingestion.retention import RetentionSweeper
from creator_feed.ingestion.service import IngestionService

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/cron", dependencies=[Depends(verify_cron_secret)])


@router.get(
    "/scrape-tweets",
    response_model=ScrapeRunResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Scrape all stale creators within each user's budget",
)
async def scrape_tweets(
    service: IngestionService = Depends(get_ingestion_service),
):
    logger.info("Cron scrape starting")
    try:
        result = await service.run_daily()
    except Exception as e:
        logger.error("Cron scrape failed", error=str(e), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Cron job failed", "details": str(e)},
        )

    return ScrapeRunResponse(
        timestamp=result.timestamp.isoformat() if result.timestamp else None,
        users=result.users,
        total_scraped=result.total_scraped,
        summary=result.summary,
        errors=result.errors or None,
    )


@router.get(
    "/cleanup-tweets",
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Delete tweets past the retention window",
)
async def cleanup_tweets(
    sweeper: RetentionSweeper = Depends(get_retention_sweeper),
    config: IngestionConfig = Depends(get_ingestion_config),
) -> JSONResponse:
    logger.info("Cron cleanup starting", retention_days=config.retention_days)
    result = await sweeper.run_sweep(config.retention_days)
    logger.info(
        "Cron cleanup finished",
        success=result.success,
        deleted_count=result.deleted_count,
        duration_ms=result.duration_ms,
    )
    return JSONResponse(status_code=200, content=result.to_dict())
