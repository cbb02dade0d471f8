"""Provider-neutral shapes exchanged with tweet scrapers."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from creator_feed.storage.schemas import TweetMetrics

DEFAULT_WINDOW = timedelta(hours=24)


@dataclass
class ScrapedTweet:
    """A tweet as returned by a provider, before it is stored."""

    source_id: str
    content: str
    author_handle: str
    published_at: datetime
    metrics: TweetMetrics = field(default_factory=dict)


@dataclass
class ScrapeRequest:
    """
    Parameters for one scrape of a single handle.

    Attributes:
        handle: Twitter handle, with or without leading '@'
        max_items: Upper bound on tweets returned
        start_date: Window start (default: 24 hours before end_date)
        end_date: Window end (default: now)
    """

    handle: str
    max_items: int
    start_date: datetime | None = None
    end_date: datetime | None = None

    def window(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        """Resolve the (since, until) window, filling the trailing-24h default."""
        until = self.end_date or now or datetime.now(timezone.utc)
        since = self.start_date or until - DEFAULT_WINDOW
        return since, until


@dataclass
class ProviderQuery:
    """A provider request built once per scrape and reused for every page."""

    handle: str
    params: dict[str, Any]


@dataclass
class TweetPage:
    """One page of provider results plus the cursor for the next call."""

    items: list[ScrapedTweet]
    has_more: bool = False
    next_cursor: str | None = None


@dataclass
class HandleValidation:
    """Outcome of validating a handle. Invalid handles carry a user-facing error."""

    valid: bool
    provider_user_id: str | None = None
    error: str | None = None
