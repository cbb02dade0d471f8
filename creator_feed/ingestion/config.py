"""Configuration for daily ingestion, sampling and retention."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestionConfig(BaseSettings):
    """Budgets, pacing and windows for the creator tweet pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    default_daily_limit: int = Field(
        default=50,
        ge=1,
        description="Daily tweet budget for users who never set one",
    )
    max_daily_limit: int = Field(
        default=1000,
        ge=1,
        description="Upper bound accepted for a user's daily tweet budget",
    )
    stale_hours: float = Field(
        default=24.0,
        gt=0,
        description="Creators scraped more recently than this are skipped by the daily run",
    )
    creator_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Pause between creators during a run to stay under provider rate limits",
    )
    sample_limit: int = Field(
        default=50,
        ge=1,
        description="Default number of tweets in a balanced sample",
    )
    sample_days_back: int = Field(
        default=30,
        ge=1,
        description="Default look-back window for a balanced sample",
    )
    retention_days: int = Field(
        default=7,
        ge=0,
        description="Tweets published longer ago than this are swept",
    )
