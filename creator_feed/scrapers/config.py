"""Configuration for tweet source providers."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScraperConfig(BaseSettings):
    """
    Tuning for provider HTTP calls and the page loop.

    Credentials and provider selection live in the main Settings;
    these are overridable via SCRAPER_* environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRAPER_",
        case_sensitive=False,
        extra="ignore",
    )

    request_timeout_seconds: float = Field(default=30.0, gt=0)
    max_pages: int = Field(
        default=50,
        ge=1,
        description="Hard cap on page requests per scrape, on top of max_items",
    )

    twitterapi_base_url: str = "https://api.twitterapi.io/twitter"

    apify_base_url: str = "https://api.apify.com/v2"
    apify_actor_id: str = "apidojo~tweet-scraper"
    # run-sync blocks until the actor finishes
    apify_timeout_seconds: float = Field(default=300.0, gt=0)
