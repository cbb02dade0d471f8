"""
Provider selection.

create_scraper() is the only place that branches on provider identity.
It fails fast when the selected provider's credential is missing, since
that is a deployment defect rather than a runtime condition.
"""

import logging

from creator_feed.config.settings import Settings, get_settings
from creator_feed.scrapers.apify import ApifyScraper
from creator_feed.scrapers.base import ScraperConfigurationError, TweetScraper
from creator_feed.scrapers.config import ScraperConfig
from creator_feed.scrapers.http_client import RetryConfig
from creator_feed.scrapers.twitterapi import TwitterAPIScraper

logger = logging.getLogger(__name__)

# provider -> (implementation, Settings attribute, environment variable)
PROVIDERS: dict[str, tuple[type[TweetScraper], str, str]] = {
    "twitterapi": (TwitterAPIScraper, "twitterapi_io_key", "TWITTERAPI_IO_KEY"),
    "apify": (ApifyScraper, "apify_api_key", "APIFY_API_KEY"),
}


def create_scraper(
    settings: Settings | None = None,
    config: ScraperConfig | None = None,
) -> TweetScraper:
    """
    Build the tweet scraper selected by settings.scraper_provider.

    Raises:
        ScraperConfigurationError: Unknown provider or missing API key
    """
    settings = settings or get_settings()
    provider = settings.scraper_provider

    try:
        scraper_cls, key_attr, env_var = PROVIDERS[provider]
    except KeyError:
        raise ScraperConfigurationError(f"Unsupported scraper provider: {provider}") from None

    api_key = getattr(settings, key_attr)
    if not api_key:
        raise ScraperConfigurationError(f"{env_var} environment variable is not set")

    retry_config = RetryConfig(
        max_retries=settings.max_http_retries,
        max_backoff_seconds=settings.max_backoff_seconds,
    )
    scraper = scraper_cls(api_key, config=config, retry_config=retry_config)
    logger.info(f"Using {scraper.provider_name} tweet scraper")
    return scraper
