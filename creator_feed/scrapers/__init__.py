"""Tweet sources: provider port, page loop and the two provider implementations."""

from creator_feed.scrapers.base import (
    ProviderRequestError,
    ScraperConfigurationError,
    ScraperError,
    TweetScraper,
)
from creator_feed.scrapers.factory import create_scraper
from creator_feed.scrapers.pagination import PagedFetcher
from creator_feed.scrapers.schemas import (
    HandleValidation,
    ProviderQuery,
    ScrapedTweet,
    ScrapeRequest,
    TweetPage,
)

__all__ = [
    "HandleValidation",
    "PagedFetcher",
    "ProviderQuery",
    "ProviderRequestError",
    "ScrapeRequest",
    "ScrapedTweet",
    "ScraperConfigurationError",
    "ScraperError",
    "TweetPage",
    "TweetScraper",
    "create_scraper",
]
