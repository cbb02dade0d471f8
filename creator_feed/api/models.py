"""
Pydantic models for API request/response validation.
"""

from typing import Any

from pydantic import BaseModel, Field

from creator_feed.storage.schemas import Creator


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="error",
        description="Type of error",
    )


# ── Health ──────────────────────────────────────────────────


class ComponentHealth(BaseModel):
    """Health of a single dependency."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency")
    details: dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or unhealthy",
    )
    provider: str = Field(..., description="Configured tweet provider")
    provider_configured: bool = Field(
        ...,
        description="Whether the provider's API key is present",
    )
    components: dict[str, ComponentHealth] = Field(default_factory=dict)
    version: str = Field(default="0.1.0")


# ── Creators ────────────────────────────────────────────────


class CreatorItem(BaseModel):
    """A tracked creator."""

    id: str
    user_id: str
    handle: str
    is_active: bool
    requested_daily_count: int
    provider_user_id: str | None = None
    last_scraped_at: str | None = None
    created_at: str | None = None

    @classmethod
    def from_creator(cls, creator: Creator) -> "CreatorItem":
        return cls(
            id=creator.id,
            user_id=creator.user_id,
            handle=creator.handle,
            is_active=creator.is_active,
            requested_daily_count=creator.requested_daily_count,
            provider_user_id=creator.provider_user_id,
            last_scraped_at=(
                creator.last_scraped_at.isoformat() if creator.last_scraped_at else None
            ),
            created_at=creator.created_at.isoformat() if creator.created_at else None,
        )


class CreatorsListResponse(BaseModel):
    creators: list[CreatorItem] = Field(default_factory=list)
    total: int = Field(..., description="Number of creators returned")


class CreateCreatorRequest(BaseModel):
    """Request to start tracking a handle."""

    handle: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Twitter handle, with or without leading '@'",
    )
    requested_daily_count: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Tweets per day to scrape for this creator",
    )


class UpdateCreatorRequest(BaseModel):
    requested_daily_count: int = Field(
        ...,
        ge=1,
        le=100,
        description="Tweets per day to scrape for this creator",
    )


class ScrapeCreatorResponse(BaseModel):
    """Outcome of a manual scrape."""

    success: bool = True
    count: int = Field(..., description="Tweets stored")
    creator: str = Field(..., description="Creator handle")
    requested_count: int
    actual_count: int = Field(..., description="Quota after budget scaling")
    was_scaled: bool


# ── User settings ───────────────────────────────────────────


class UserSettingsResponse(BaseModel):
    user_id: str
    daily_tweet_limit: int
    is_default: bool = Field(
        default=False,
        description="True when the user never set a limit",
    )


class UpdateUserSettingsRequest(BaseModel):
    daily_tweet_limit: int = Field(
        ...,
        ge=1,
        description="Total tweets scraped per day across all creators",
    )


# ── Tweets ──────────────────────────────────────────────────


class SampledTweetItem(BaseModel):
    content: str
    author: str
    published_at: str
    metrics: dict[str, int | float] = Field(default_factory=dict)


class TweetSampleResponse(BaseModel):
    """Balanced sample of recent creator tweets."""

    tweets: list[SampledTweetItem] = Field(default_factory=list)
    total: int
    limit: int
    days_back: int
    latency_ms: float


# ── Cron ────────────────────────────────────────────────────


class ScrapeRunResponse(BaseModel):
    """Summary of a scheduled scrape run."""

    success: bool = True
    timestamp: str | None = None
    users: int
    total_scraped: int
    summary: dict[str, int] = Field(
        default_factory=dict,
        description="Tweets stored per user",
    )
    errors: list[dict[str, str]] | None = Field(
        default=None,
        description="Per-creator or per-user failures, omitted when empty",
    )
