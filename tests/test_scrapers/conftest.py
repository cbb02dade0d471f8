"""Shared fixtures for tweet scraper tests."""

from datetime import datetime

import pytest

from creator_feed.scrapers.apify import ApifyScraper
from creator_feed.scrapers.base import TweetScraper
from creator_feed.scrapers.config import ScraperConfig
from creator_feed.scrapers.http_client import RetryConfig
from creator_feed.scrapers.schemas import HandleValidation, ProviderQuery, TweetPage
from creator_feed.scrapers.twitterapi import TwitterAPIScraper

TWITTERAPI_BASE = "https://api.twitterapi.io/twitter"
APIFY_RUN_URL = (
    "https://api.apify.com/v2/acts/apidojo~tweet-scraper/run-sync-get-dataset-items"
)


class ScriptedScraper(TweetScraper):
    """
    Scraper whose pages come from a list instead of the network.

    Items in `pages` are TweetPage instances or exceptions to raise.
    Every fetch_page call is recorded in `calls` as (query, cursor).
    """

    def __init__(self, pages, max_pages: int = 50):
        super().__init__("scripted-key", config=ScraperConfig(max_pages=max_pages))
        self._pages = list(pages)
        self.calls: list[tuple[ProviderQuery, str | None]] = []
        self.lookups: list[str] = []

    @property
    def provider_name(self) -> str:
        return "Scripted"

    def build_query(self, handle: str, max_items: int, since: datetime, until: datetime):
        return ProviderQuery(handle=handle, params={"max_items": max_items})

    async def fetch_page(self, query: ProviderQuery, cursor: str | None) -> TweetPage:
        self.calls.append((query, cursor))
        page = self._pages.pop(0) if self._pages else TweetPage(items=[])
        if isinstance(page, Exception):
            raise page
        return page

    async def _lookup_handle(self, handle: str) -> HandleValidation:
        self.lookups.append(handle)
        return HandleValidation(valid=True, provider_user_id="42")


@pytest.fixture
def scripted_scraper():
    """Factory: scripted_scraper([TweetPage(...), ...], max_pages=50)."""
    return ScriptedScraper


@pytest.fixture
def no_retry() -> RetryConfig:
    return RetryConfig(max_retries=0)


@pytest.fixture
def twitterapi_scraper(no_retry) -> TwitterAPIScraper:
    return TwitterAPIScraper("test-twitterapi-key", retry_config=no_retry)


@pytest.fixture
def apify_scraper(no_retry) -> ApifyScraper:
    return ApifyScraper("test-apify-token", retry_config=no_retry)


@pytest.fixture
def twitterapi_base() -> str:
    return TWITTERAPI_BASE


@pytest.fixture
def apify_run_url() -> str:
    return APIFY_RUN_URL
