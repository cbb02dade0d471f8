"""Records produced by quota allocation, sampling, sweeps and daily runs."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from creator_feed.storage.schemas import StoredTweet, TweetMetrics


@dataclass
class CreatorQuotaRequest:
    """A creator's requested daily count as seen by the allocator."""

    creator_id: str
    handle: str
    requested_count: int
    is_active: bool = True


@dataclass
class AllocatedQuota:
    """How many tweets a creator may fetch today."""

    creator_id: str
    handle: str
    requested_count: int
    actual_count: int
    was_scaled: bool = False


@dataclass
class SampledTweet:
    """A tweet handed to the generation pipeline."""

    content: str
    author: str
    published_at: str
    metrics: TweetMetrics = field(default_factory=dict)

    @classmethod
    def from_stored(cls, tweet: StoredTweet) -> "SampledTweet":
        return cls(
            content=tweet.content,
            author=tweet.author_handle,
            published_at=tweet.published_at.isoformat(),
            metrics=dict(tweet.metrics),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SweepResult:
    """Outcome of one retention sweep. Failures carry error, not an exception."""

    success: bool
    deleted_count: int = 0
    error: str | None = None
    duration_ms: int = 0
    timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
        if self.success:
            data["deleted_count"] = self.deleted_count
        else:
            data["error"] = self.error
        return data


@dataclass
class CreatorScrapeResult:
    """Outcome of scraping a single creator."""

    creator_id: str
    handle: str
    count: int
    requested_count: int
    actual_count: int
    was_scaled: bool = False


@dataclass
class IngestionRunResult:
    """Summary of a daily ingestion run across all users."""

    users: int = 0
    total_scraped: int = 0
    summary: dict[str, int] = field(default_factory=dict)
    errors: list[dict[str, str]] = field(default_factory=list)
    timestamp: datetime | None = None
