"""Shared fixtures for API tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from creator_feed.api.app import create_app
from creator_feed.api.auth import verify_api_key
from creator_feed.api.dependencies import (
    get_database,
    get_ingestion_config,
    get_ingestion_service,
    get_retention_sweeper,
    get_sampler,
    get_scraper,
    get_tweet_store,
)
from creator_feed.ingestion.config import IngestionConfig
from creator_feed.scrapers.schemas import HandleValidation
from creator_feed.storage.schemas import Creator


def _make_creator(
    creator_id: str = "c1",
    handle: str = "alice",
    is_active: bool = True,
    requested_daily_count: int = 10,
) -> Creator:
    """Helper to create a Creator with sensible defaults."""
    return Creator(
        id=creator_id,
        user_id="user_1",
        handle=handle,
        is_active=is_active,
        requested_daily_count=requested_daily_count,
        provider_user_id="777",
        last_scraped_at=None,
        created_at=datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_creator():
    return _make_creator


@pytest.fixture
def mock_store():
    """Mock TweetStore."""
    store = AsyncMock()
    store.list_creators = AsyncMock(return_value=[])
    store.add_creator = AsyncMock(return_value=_make_creator())
    store.toggle_creator = AsyncMock(return_value=None)
    store.update_requested_count = AsyncMock(return_value=None)
    store.delete_creator = AsyncMock(return_value=False)
    store.get_daily_limit = AsyncMock(return_value=None)
    store.set_daily_limit = AsyncMock()
    return store


@pytest.fixture
def mock_scraper():
    """Mock TweetScraper that accepts every handle."""
    scraper = MagicMock()
    scraper.provider_name = "Mock"
    scraper.validate_handle = AsyncMock(
        return_value=HandleValidation(valid=True, provider_user_id="777")
    )
    return scraper


@pytest.fixture
def mock_ingestion_service():
    service = AsyncMock()
    service.scrape_creator = AsyncMock(return_value=None)
    service.run_daily = AsyncMock()
    return service


@pytest.fixture
def mock_sampler():
    sampler = AsyncMock()
    sampler.sample = AsyncMock(return_value=[])
    return sampler


@pytest.fixture
def mock_sweeper():
    sweeper = AsyncMock()
    sweeper.run_sweep = AsyncMock()
    return sweeper


@pytest.fixture
def api_config() -> IngestionConfig:
    return IngestionConfig(sample_limit=50, sample_days_back=30, retention_days=7)


@pytest.fixture
def client(
    mock_store,
    mock_scraper,
    mock_ingestion_service,
    mock_sampler,
    mock_sweeper,
    mock_database,
    api_config,
):
    """FastAPI TestClient with dependency overrides."""
    app = create_app()

    app.dependency_overrides[verify_api_key] = lambda: "test-key"
    app.dependency_overrides[get_database] = lambda: mock_database
    app.dependency_overrides[get_tweet_store] = lambda: mock_store
    app.dependency_overrides[get_scraper] = lambda: mock_scraper
    app.dependency_overrides[get_ingestion_service] = lambda: mock_ingestion_service
    app.dependency_overrides[get_sampler] = lambda: mock_sampler
    app.dependency_overrides[get_retention_sweeper] = lambda: mock_sweeper
    app.dependency_overrides[get_ingestion_config] = lambda: api_config

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
