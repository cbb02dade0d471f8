"""
Tweet source port: the one interface every provider implements.

A provider supplies:
    - provider_name: Label used in logs and metrics
    - build_query(): Provider request for a handle + date window
    - fetch_page(): One page of results for a query and cursor
    - _lookup_handle(): Network existence check for a well-formed handle

The base class turns those into the public operations:
    - scrape_tweets(): Paged fetch that never raises for provider failures
    - validate_handle(): Local format check, then a provider lookup whose
      failures are mapped to user-facing messages
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from creator_feed.scrapers.config import ScraperConfig
from creator_feed.scrapers.handles import (
    INVALID_HANDLE_MESSAGE,
    is_valid_handle,
    normalize_handle,
)
from creator_feed.scrapers.http_client import RetryConfig
from creator_feed.scrapers.pagination import PagedFetcher
from creator_feed.scrapers.schemas import (
    HandleValidation,
    ProviderQuery,
    ScrapedTweet,
    ScrapeRequest,
    TweetPage,
)
from creator_feed.storage.schemas import TweetMetrics

logger = logging.getLogger(__name__)

ACCOUNT_NOT_FOUND_MESSAGE = "Twitter account not found."

# Twitter's classic created_at format: "Tue Dec 10 07:00:30 +0000 2024"
_TWITTER_DATE_FORMAT = "%a %b %d %H:%M:%S %z %Y"


class ScraperError(Exception):
    """Base exception for tweet source errors."""


class ProviderRequestError(ScraperError):
    """A provider call failed or returned an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ScraperConfigurationError(ScraperError):
    """The selected provider is unknown or its credential is missing."""


def parse_tweet_timestamp(value: Any) -> datetime:
    """
    Parse a provider timestamp into an aware UTC datetime.

    Accepts ISO-8601 (with 'Z' or offset) and Twitter's classic format.
    Falls back to now when the value is missing or unparseable.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            pass
        try:
            return datetime.strptime(value, _TWITTER_DATE_FORMAT).astimezone(timezone.utc)
        except ValueError:
            logger.debug(f"Unparseable tweet timestamp: {value!r}")

    return datetime.now(timezone.utc)


def collect_metrics(raw: dict[str, Any], fields: dict[str, tuple[str, ...]]) -> TweetMetrics:
    """
    Build a metrics map from provider fields.

    `fields` maps our metric name to candidate provider keys, first match
    wins. Missing or non-numeric values are skipped except the core
    counters, which default to 0.
    """
    metrics: TweetMetrics = {}
    for name, keys in fields.items():
        for key in keys:
            value = raw.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                metrics[name] = value
                break
        else:
            if name in ("likes", "retweets", "replies"):
                metrics[name] = 0
    return metrics


class TweetScraper(ABC):
    """
    Abstract base class for tweet source providers.

    Instances are built once per process by create_scraper() and are
    read-only afterwards, so one instance may serve concurrent requests.
    """

    # Shown when a lookup fails for reasons other than "not found"
    unavailable_message = "Unable to validate Twitter handle. Please try again later."

    def __init__(
        self,
        api_key: str,
        config: ScraperConfig | None = None,
        retry_config: RetryConfig | None = None,
    ):
        self._api_key = api_key
        self._config = config or ScraperConfig()
        self._retry_config = retry_config or RetryConfig()

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable provider name for diagnostics."""
        ...

    @abstractmethod
    def build_query(
        self,
        handle: str,
        max_items: int,
        since: datetime,
        until: datetime,
    ) -> ProviderQuery:
        """Build the provider request for a normalized handle and window."""
        ...

    @abstractmethod
    async def fetch_page(self, query: ProviderQuery, cursor: str | None) -> TweetPage:
        """
        Fetch one page of results.

        Raises:
            ProviderRequestError: On HTTP failure or malformed payload
        """
        ...

    @abstractmethod
    async def _lookup_handle(self, handle: str) -> HandleValidation:
        """
        Check a well-formed, normalized handle against the provider.

        May raise; validate_handle() maps any exception to a generic message.
        """
        ...

    async def scrape_tweets(self, request: ScrapeRequest) -> list[ScrapedTweet]:
        """
        Scrape up to request.max_items tweets for one handle.

        Provider failures are logged and yield a partial (possibly empty)
        list rather than an exception.
        """
        fetcher = PagedFetcher(self, max_pages=self._config.max_pages)
        return await fetcher.fetch(request)

    async def validate_handle(self, handle: str) -> HandleValidation:
        """Validate a handle's format locally, then its existence remotely."""
        if not is_valid_handle(handle):
            return HandleValidation(valid=False, error=INVALID_HANDLE_MESSAGE)

        normalized = normalize_handle(handle)
        try:
            result = await self._lookup_handle(normalized)
        except Exception as e:
            logger.error(
                f"[{self.provider_name}] Error validating @{normalized} "
                f"(status={getattr(e, 'status_code', None)}): {e}"
            )
            return HandleValidation(valid=False, error=self.unavailable_message)

        if result.valid:
            logger.info(
                f"[{self.provider_name}] Handle @{normalized} validated "
                f"(user id {result.provider_user_id})"
            )
        return result
