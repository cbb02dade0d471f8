"""Shared fixtures for ingestion tests."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from creator_feed.ingestion.config import IngestionConfig


@pytest.fixture
def ingestion_config() -> IngestionConfig:
    return IngestionConfig(creator_delay_seconds=2.0, default_daily_limit=50, stale_hours=24)


@pytest.fixture
def mock_scraper(tweet_factory):
    """Scraper double returning `max_items` tweets authored by the requested handle."""
    scraper = MagicMock()
    scraper.provider_name = "Mock"

    async def _scrape(request):
        handle = request.handle.lstrip("@")
        return [tweet_factory(f"{handle}-{i}", handle=handle) for i in range(request.max_items)]

    scraper.scrape_tweets = AsyncMock(side_effect=_scrape)
    return scraper


@pytest.fixture
def seeded_store(memory_store, creator_factory, tweet_factory, now):
    """
    Store with three active creators holding 17, 5 and 0 recent tweets,
    plus one paused creator.
    """
    memory_store.add(creator_factory("c_alice", handle="alice"))
    memory_store.add(creator_factory("c_bob", handle="bob"))
    memory_store.add(creator_factory("c_carol", handle="carol"))
    memory_store.add(creator_factory("c_paused", handle="paused", is_active=False))

    for i in range(17):
        t = tweet_factory(f"a{i}", handle="alice", published_at=now - timedelta(hours=i + 1))
        memory_store.tweets[("c_alice", t.source_id)] = _stored(t, "c_alice")
    for i in range(5):
        t = tweet_factory(f"b{i}", handle="bob", published_at=now - timedelta(days=i + 1))
        memory_store.tweets[("c_bob", t.source_id)] = _stored(t, "c_bob")
    for i in range(3):
        t = tweet_factory(f"p{i}", handle="paused", published_at=now - timedelta(hours=2))
        memory_store.tweets[("c_paused", t.source_id)] = _stored(t, "c_paused")

    return memory_store


def _stored(tweet, creator_id):
    from creator_feed.storage.schemas import StoredTweet

    return StoredTweet(
        source_id=tweet.source_id,
        creator_id=creator_id,
        content=tweet.content,
        author_handle=tweet.author_handle,
        published_at=tweet.published_at,
        metrics=dict(tweet.metrics),
    )
