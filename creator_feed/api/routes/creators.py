"""Creator management: track, pause, resize, delete and manually scrape handles."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
import structlog

from creator_feed.api.auth import verify_api_key
from creator_feed.api.dependencies import get_ingestion_service, get_scraper, get_tweet_store
from creator_feed.api.models import (
    CreateCreatorRequest,
    CreatorItem,
    CreatorsListResponse,
    ErrorResponse,
    ScrapeCreatorResponse,
    UpdateCreatorRequest,
)
from creator_feed.ingestion.service import IngestionService
from creator_feed.scrapers.base import TweetScraper
from creator_feed.scrapers.handles import normalize_handle
from creator_feed.storage.repository import TweetStore

logger = structlog.get_logger(__name__)
router = APIRouter()


def _not_found(creator_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Creator {creator_id} not found",
    )


@router.get(
    "/users/{user_id}/creators",
    response_model=CreatorsListResponse,
    responses={401: {"model": ErrorResponse}},
    summary="List a user's creators",
)
async def list_creators(
    user_id: str,
    api_key: str = Depends(verify_api_key),
    store: TweetStore = Depends(get_tweet_store),
) -> CreatorsListResponse:
    creators = await store.list_creators(user_id)
    return CreatorsListResponse(
        creators=[CreatorItem.from_creator(c) for c in creators],
        total=len(creators),
    )


@router.post(
    "/users/{user_id}/creators",
    response_model=CreatorItem,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Track a new creator",
)
async def add_creator(
    user_id: str,
    body: CreateCreatorRequest,
    api_key: str = Depends(verify_api_key),
    store: TweetStore = Depends(get_tweet_store),
    scraper: TweetScraper = Depends(get_scraper),
) -> CreatorItem:
    validation = await scraper.validate_handle(body.handle)
    if not validation.valid:
        logger.info("Creator handle rejected", handle=body.handle, reason=validation.error)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation.error)

    creator = await store.add_creator(
        user_id,
        normalize_handle(body.handle),
        requested_daily_count=body.requested_daily_count,
        provider_user_id=validation.provider_user_id,
    )
    logger.info("Creator added", user_id=user_id, handle=creator.handle, creator_id=creator.id)
    return CreatorItem.from_creator(creator)


@router.patch(
    "/creators/{creator_id}/toggle",
    response_model=CreatorItem,
    responses={404: {"model": ErrorResponse}},
    summary="Pause or resume a creator",
)
async def toggle_creator(
    creator_id: str,
    api_key: str = Depends(verify_api_key),
    store: TweetStore = Depends(get_tweet_store),
) -> CreatorItem:
    creator = await store.toggle_creator(creator_id)
    if creator is None:
        raise _not_found(creator_id)
    logger.info("Creator toggled", creator_id=creator_id, is_active=creator.is_active)
    return CreatorItem.from_creator(creator)


@router.patch(
    "/creators/{creator_id}",
    response_model=CreatorItem,
    responses={404: {"model": ErrorResponse}},
    summary="Change a creator's requested daily count",
)
async def update_creator(
    creator_id: str,
    body: UpdateCreatorRequest,
    api_key: str = Depends(verify_api_key),
    store: TweetStore = Depends(get_tweet_store),
) -> CreatorItem:
    creator = await store.update_requested_count(creator_id, body.requested_daily_count)
    if creator is None:
        raise _not_found(creator_id)
    return CreatorItem.from_creator(creator)


@router.delete(
    "/creators/{creator_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Stop tracking a creator and drop its tweets",
)
async def delete_creator(
    creator_id: str,
    api_key: str = Depends(verify_api_key),
    store: TweetStore = Depends(get_tweet_store),
) -> Response:
    if not await store.delete_creator(creator_id):
        raise _not_found(creator_id)
    logger.info("Creator deleted", creator_id=creator_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/creators/{creator_id}/scrape",
    response_model=ScrapeCreatorResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Scrape a creator now",
)
async def scrape_creator(
    creator_id: str,
    api_key: str = Depends(verify_api_key),
    service: IngestionService = Depends(get_ingestion_service),
) -> ScrapeCreatorResponse:
    try:
        result = await service.scrape_creator(creator_id)
    except Exception as e:
        logger.error("scrape_creator_failed", creator_id=creator_id, error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to scrape creator tweets")

    if result is None:
        raise _not_found(creator_id)

    return ScrapeCreatorResponse(
        count=result.count,
        creator=result.handle,
        requested_count=result.requested_count,
        actual_count=result.actual_count,
        was_scaled=result.was_scaled,
    )
