"""Storage layer for creators, budgets and stored tweets."""

from creator_feed.storage.database import Database
from creator_feed.storage.repository import TweetStore
from creator_feed.storage.schemas import Creator, StoredTweet, TweetMetrics

__all__ = [
    "Creator",
    "Database",
    "StoredTweet",
    "TweetMetrics",
    "TweetStore",
]
