"""
Daily ingestion run: scrape every stale creator within its user's budget.

For each user with active creators:
- Select creators not scraped within `stale_hours` (never-scraped first)
- Allocate quotas against the user's daily tweet limit
- Scrape each creator up to its quota, upsert, stamp last_scraped_at
- Pause between creators to stay under provider rate limits

A failing creator or user is recorded in the run result and the run
moves on.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

import structlog

from creator_feed.ingestion.allocation import allocate_quotas, quota_requests
from creator_feed.ingestion.config import IngestionConfig
from creator_feed.ingestion.schemas import (
    AllocatedQuota,
    CreatorScrapeResult,
    IngestionRunResult,
)
from creator_feed.scrapers.base import TweetScraper
from creator_feed.scrapers.schemas import ScrapeRequest
from creator_feed.storage.repository import TweetStore
from creator_feed.storage.schemas import Creator

logger = structlog.get_logger(__name__)


class IngestionService:
    """
    Orchestrates scraping for the daily run and manual scrapes.

    The scraper is injected; the service never constructs or looks up
    a provider itself.

    Usage:
        service = IngestionService(store, create_scraper())
        result = await service.run_daily()
    """

    def __init__(
        self,
        store: TweetStore,
        scraper: TweetScraper,
        config: IngestionConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._scraper = scraper
        self._config = config or IngestionConfig()
        self._sleep = sleep

    async def daily_limit_for(self, user_id: str) -> int:
        """The user's budget, falling back to the configured default."""
        limit = await self._store.get_daily_limit(user_id)
        return limit if limit else self._config.default_daily_limit

    async def run_daily(self, user_ids: list[str] | None = None) -> IngestionRunResult:
        """
        Scrape stale creators for every user (or only `user_ids`).

        Returns:
            Per-user tweet counts, the grand total and collected errors
        """
        if user_ids is None:
            user_ids = await self._store.list_users_with_active_creators()

        result = IngestionRunResult(users=len(user_ids))
        logger.info("Starting daily ingestion run", users=len(user_ids))

        for user_id in user_ids:
            try:
                await self._run_user(user_id, result)
            except Exception as e:
                logger.error("User ingestion failed", user_id=user_id, error=str(e))
                result.errors.append({"user": user_id, "error": str(e)})

        result.timestamp = datetime.now(timezone.utc)
        logger.info(
            "Daily ingestion run completed",
            users=result.users,
            total_scraped=result.total_scraped,
            errors=len(result.errors),
        )
        return result

    async def _run_user(self, user_id: str, result: IngestionRunResult) -> None:
        stale_before = datetime.now(timezone.utc) - timedelta(hours=self._config.stale_hours)
        creators = await self._store.get_creators_needing_scraping(user_id, stale_before)
        if not creators:
            logger.debug("No stale creators", user_id=user_id)
            return

        daily_limit = await self.daily_limit_for(user_id)
        quotas = allocate_quotas(quota_requests(creators), daily_limit)
        by_id = {c.id: c for c in creators}
        result.summary[user_id] = 0

        for index, quota in enumerate(quotas):
            if index > 0 and self._config.creator_delay_seconds > 0:
                await self._sleep(self._config.creator_delay_seconds)

            creator = by_id[quota.creator_id]
            try:
                count = await self._scrape_and_store(creator, quota)
            except Exception as e:
                logger.error(
                    "Creator scrape failed",
                    user_id=user_id,
                    handle=creator.handle,
                    error=str(e),
                )
                result.errors.append({"creator": creator.handle, "error": str(e)})
                continue

            result.total_scraped += count
            result.summary[user_id] += count

    async def _scrape_and_store(self, creator: Creator, quota: AllocatedQuota) -> int:
        logger.info(
            "Scraping creator",
            handle=creator.handle,
            quota=quota.actual_count,
            scaled=quota.was_scaled,
        )
        tweets = await self._scraper.scrape_tweets(
            ScrapeRequest(handle=creator.handle, max_items=quota.actual_count)
        )
        if not tweets:
            # Provider failures also land here; leave the creator due for the next run
            logger.warning("No tweets returned, creator left stale", handle=creator.handle)
            return 0

        stored = await self._store.upsert_tweets(creator.id, tweets)
        await self._store.mark_scraped(creator.id)
        return stored

    async def scrape_creator(self, creator_id: str) -> CreatorScrapeResult | None:
        """
        Scrape one creator now, using its share of the user's budget.

        Returns:
            The scrape outcome, or None if the creator does not exist
        """
        creator = await self._store.get_creator(creator_id)
        if creator is None:
            return None

        active = await self._store.list_active_creators(creator.user_id)
        daily_limit = await self.daily_limit_for(creator.user_id)
        quotas = allocate_quotas(quota_requests(active), daily_limit)
        quota = next((q for q in quotas if q.creator_id == creator_id), None)

        if quota is None:
            # Paused creators are not in the allocation; scrape what they asked for
            quota = AllocatedQuota(
                creator_id=creator.id,
                handle=creator.handle,
                requested_count=creator.requested_daily_count,
                actual_count=max(creator.requested_daily_count, 0),
            )

        count = await self._scrape_and_store(creator, quota)
        return CreatorScrapeResult(
            creator_id=creator.id,
            handle=creator.handle,
            count=count,
            requested_count=creator.requested_daily_count,
            actual_count=quota.actual_count,
            was_scaled=quota.was_scaled,
        )
