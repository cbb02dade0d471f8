"""Per-user daily tweet budget."""

from fastapi import APIRouter, Depends, HTTPException, status
import structlog

from creator_feed.api.auth import verify_api_key
from creator_feed.api.dependencies import get_ingestion_config, get_tweet_store
from creator_feed.api.models import ErrorResponse, UpdateUserSettingsRequest, UserSettingsResponse
from creator_feed.ingestion.config import IngestionConfig
from creator_feed.storage.repository import TweetStore

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/users/{user_id}/settings",
    response_model=UserSettingsResponse,
    summary="Get a user's daily tweet limit",
)
async def get_user_settings(
    user_id: str,
    api_key: str = Depends(verify_api_key),
    store: TweetStore = Depends(get_tweet_store),
    config: IngestionConfig = Depends(get_ingestion_config),
) -> UserSettingsResponse:
    limit = await store.get_daily_limit(user_id)
    if limit is None:
        return UserSettingsResponse(
            user_id=user_id,
            daily_tweet_limit=config.default_daily_limit,
            is_default=True,
        )
    return UserSettingsResponse(user_id=user_id, daily_tweet_limit=limit)


@router.patch(
    "/users/{user_id}/settings",
    response_model=UserSettingsResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Set a user's daily tweet limit",
)
async def update_user_settings(
    user_id: str,
    body: UpdateUserSettingsRequest,
    api_key: str = Depends(verify_api_key),
    store: TweetStore = Depends(get_tweet_store),
    config: IngestionConfig = Depends(get_ingestion_config),
) -> UserSettingsResponse:
    if body.daily_tweet_limit > config.max_daily_limit:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Daily tweet limit must be between 1 and {config.max_daily_limit}",
        )

    await store.set_daily_limit(user_id, body.daily_tweet_limit)
    logger.info("Daily tweet limit updated", user_id=user_id, limit=body.daily_tweet_limit)
    return UserSettingsResponse(user_id=user_id, daily_tweet_limit=body.daily_tweet_limit)
