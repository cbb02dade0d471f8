"""Balanced tweet sample for idea generation."""

import time

from fastapi import APIRouter, Depends, Query
import structlog

from creator_feed.api.auth import verify_api_key
from creator_feed.api.dependencies import get_ingestion_config, get_sampler
from creator_feed.api.models import SampledTweetItem, TweetSampleResponse
from creator_feed.ingestion.config import IngestionConfig
from creator_feed.ingestion.sampling import BalancedSampler

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/users/{user_id}/tweets/sample",
    response_model=TweetSampleResponse,
    summary="Balanced sample of recent creator tweets",
)
async def sample_tweets(
    user_id: str,
    limit: int | None = Query(default=None, ge=1, le=500, description="Sample size"),
    days_back: int | None = Query(default=None, ge=1, le=365, description="Look-back window"),
    api_key: str = Depends(verify_api_key),
    sampler: BalancedSampler = Depends(get_sampler),
    config: IngestionConfig = Depends(get_ingestion_config),
) -> TweetSampleResponse:
    limit = limit or config.sample_limit
    days_back = days_back or config.sample_days_back
    start = time.perf_counter()

    tweets = await sampler.sample(user_id, limit=limit, days_back=days_back)

    return TweetSampleResponse(
        tweets=[SampledTweetItem(**t.to_dict()) for t in tweets],
        total=len(tweets),
        limit=limit,
        days_back=days_back,
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
    )
