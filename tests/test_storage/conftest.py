"""Shared fixtures for storage tests."""

from datetime import datetime, timezone

import pytest

from creator_feed.storage.repository import TweetStore


@pytest.fixture
def store(mock_database) -> TweetStore:
    return TweetStore(mock_database)


@pytest.fixture
def creator_row():
    """A creators row as asyncpg would return it (mapping access)."""

    def _make(**overrides):
        row = {
            "id": "c1",
            "user_id": "user_1",
            "handle": "alice",
            "is_active": True,
            "requested_daily_count": 10,
            "provider_user_id": "777",
            "last_scraped_at": None,
            "created_at": datetime(2026, 3, 1, tzinfo=timezone.utc),
        }
        row.update(overrides)
        return row

    return _make
