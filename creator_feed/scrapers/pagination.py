"""
Cursor-driven page loop shared by all tweet providers.

Stops on whichever comes first:
- max_items tweets accumulated (never more, even if a page overshoots)
- an empty page, has_more=False, or a missing/repeated cursor
- a provider failure (logged; tweets gathered so far are returned)
- the max_pages safety cap
"""

import logging
import time
from typing import TYPE_CHECKING

from creator_feed.observability.metrics import get_metrics
from creator_feed.scrapers.handles import normalize_handle
from creator_feed.scrapers.schemas import ScrapedTweet, ScrapeRequest

if TYPE_CHECKING:
    from creator_feed.scrapers.base import TweetScraper

logger = logging.getLogger(__name__)


class PagedFetcher:
    """
    Drives a TweetScraper through cursor pages for one handle.

    Each iteration issues exactly one provider call and either advances
    the cursor or terminates, so the number of calls is bounded.
    """

    def __init__(self, scraper: "TweetScraper", max_pages: int = 50):
        self._scraper = scraper
        self._max_pages = max_pages
        self.calls_made = 0

    async def fetch(self, request: ScrapeRequest) -> list[ScrapedTweet]:
        """Fetch up to request.max_items tweets. Never raises for provider failures."""
        provider = self._scraper.provider_name
        handle = normalize_handle(request.handle)
        max_items = request.max_items
        self.calls_made = 0

        if max_items <= 0:
            return []

        since, until = request.window()
        query = self._scraper.build_query(handle, max_items, since, until)

        tweets: list[ScrapedTweet] = []
        cursor: str | None = None
        seen_cursors: set[str] = set()
        metrics = get_metrics()

        logger.info(
            f"[{provider}] Scraping @{handle} from {since.isoformat()} "
            f"to {until.isoformat()} (max {max_items})"
        )

        while len(tweets) < max_items and self.calls_made < self._max_pages:
            started = time.monotonic()
            self.calls_made += 1
            try:
                page = await self._scraper.fetch_page(query, cursor)
            except Exception as e:
                metrics.record_provider_error(provider, type(e).__name__)
                logger.error(
                    f"[{provider}] Page request failed for @{handle} "
                    f"after {len(tweets)} tweets: {e}",
                    extra={"status_code": getattr(e, "status_code", None)},
                )
                break

            metrics.record_page(provider, len(page.items), time.monotonic() - started)

            if not page.items:
                logger.info(f"[{provider}] No more tweets for @{handle}")
                break

            remaining_slots = max_items - len(tweets)
            tweets.extend(page.items[:remaining_slots])

            logger.debug(
                f"[{provider}] Page {self.calls_made}: {len(page.items)} tweets "
                f"for @{handle}, total {len(tweets)}/{max_items}"
            )

            if len(tweets) >= max_items or not page.has_more:
                break

            if not page.next_cursor or page.next_cursor in seen_cursors:
                logger.warning(
                    f"[{provider}] has_more without a new cursor for @{handle}, stopping"
                )
                break

            seen_cursors.add(page.next_cursor)
            cursor = page.next_cursor
        else:
            logger.warning(f"[{provider}] Page cap {self._max_pages} hit for @{handle}")

        logger.info(f"[{provider}] Scraped {len(tweets)} tweets for @{handle}")
        return tweets
