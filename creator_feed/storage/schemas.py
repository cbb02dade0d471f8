"""Persistent records for creators and their stored tweets."""

from dataclasses import dataclass, field
from datetime import datetime

# Open-ended engagement counters (likes, retweets, replies, views, ...)
TweetMetrics = dict[str, int | float]


@dataclass
class Creator:
    """A tracked handle a user draws inspiration from.

    Paused creators keep their row with is_active=False; deleting a
    creator cascades to its tweets.
    """

    id: str
    user_id: str
    handle: str
    is_active: bool = True
    requested_daily_count: int = 10
    provider_user_id: str | None = None
    last_scraped_at: datetime | None = None
    created_at: datetime | None = None


@dataclass
class StoredTweet:
    """A tweet persisted for a creator. source_id is unique per creator."""

    source_id: str
    creator_id: str
    content: str
    author_handle: str
    published_at: datetime
    metrics: TweetMetrics = field(default_factory=dict)
    scraped_at: datetime | None = None
