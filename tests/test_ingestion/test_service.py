"""Tests for IngestionService."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from creator_feed.ingestion.service import IngestionService
from creator_feed.scrapers.http_client import RetryConfig
from creator_feed.scrapers.twitterapi import TwitterAPIScraper

SEARCH_URL = "https://api.twitterapi.io/twitter/tweet/advanced_search"


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def service(memory_store, mock_scraper, ingestion_config, sleep):
    return IngestionService(memory_store, mock_scraper, config=ingestion_config, sleep=sleep)


class TestRunDaily:
    @pytest.mark.asyncio
    async def test_scrapes_within_budget(self, service, memory_store, mock_scraper, creator_factory):
        memory_store.add(creator_factory("c1", handle="alice", requested=10))
        memory_store.add(creator_factory("c2", handle="bob", requested=20))
        memory_store.daily_limits["user_1"] = 15

        result = await service.run_daily()

        requested = [call.args[0].max_items for call in mock_scraper.scrape_tweets.await_args_list]
        assert sorted(requested) == [5, 10]
        assert result.users == 1
        assert result.total_scraped == 15
        assert result.summary == {"user_1": 15}
        assert result.errors == []
        assert result.timestamp is not None
        assert len(memory_store.tweets) == 15

    @pytest.mark.asyncio
    async def test_uses_default_limit_when_unset(self, service, memory_store, mock_scraper, creator_factory):
        memory_store.add(creator_factory("c1", handle="alice", requested=80))

        await service.run_daily()

        assert mock_scraper.scrape_tweets.await_args.args[0].max_items == 50

    @pytest.mark.asyncio
    async def test_skips_recently_scraped(self, service, memory_store, mock_scraper, creator_factory):
        now = datetime.now(timezone.utc)
        memory_store.add(creator_factory("fresh", handle="fresh", last_scraped_at=now - timedelta(hours=1)))
        memory_store.add(creator_factory("stale", handle="stale", last_scraped_at=now - timedelta(days=3)))
        memory_store.add(creator_factory("never", handle="never"))

        await service.run_daily()

        handles = [call.args[0].handle for call in mock_scraper.scrape_tweets.await_args_list]
        assert handles == ["never", "stale"]
        assert memory_store.scraped == ["never", "stale"]

    @pytest.mark.asyncio
    async def test_sleeps_between_creators(self, service, memory_store, creator_factory, sleep):
        for i in range(3):
            memory_store.add(creator_factory(f"c{i}", handle=f"h{i}", requested=1))

        await service.run_daily()

        assert sleep.await_count == 2
        sleep.assert_awaited_with(2.0)

    @pytest.mark.asyncio
    async def test_creator_failure_is_collected(self, service, memory_store, mock_scraper, creator_factory, tweet_factory):
        memory_store.add(creator_factory("c1", handle="alice", requested=2))
        memory_store.add(creator_factory("c2", handle="bob", requested=2))

        async def _scrape(request):
            if request.handle == "alice":
                raise RuntimeError("provider exploded")
            return [tweet_factory("b1", handle="bob")]

        mock_scraper.scrape_tweets.side_effect = _scrape

        result = await service.run_daily()

        assert result.total_scraped == 1
        assert result.errors == [{"creator": "alice", "error": "provider exploded"}]
        assert memory_store.scraped == ["c2"]

    @pytest.mark.asyncio
    async def test_user_failure_does_not_abort_run(self, service, memory_store, creator_factory):
        memory_store.add(creator_factory("c1", handle="alice", user_id="user_1"))
        memory_store.add(creator_factory("c2", handle="bob", user_id="user_2"))
        original = memory_store.get_daily_limit

        async def _limit(user_id):
            if user_id == "user_1":
                raise ConnectionError("settings table locked")
            return await original(user_id)

        memory_store.get_daily_limit = _limit

        result = await service.run_daily()

        assert result.users == 2
        assert result.summary == {"user_2": 10}
        assert result.errors == [{"user": "user_1", "error": "settings table locked"}]

    @pytest.mark.asyncio
    async def test_restricted_to_given_users(self, service, memory_store, mock_scraper, creator_factory):
        memory_store.add(creator_factory("c1", handle="alice", user_id="user_1"))
        memory_store.add(creator_factory("c2", handle="bob", user_id="user_2"))

        result = await service.run_daily(["user_2"])

        assert result.users == 1
        assert mock_scraper.scrape_tweets.await_args.args[0].handle == "bob"

    @pytest.mark.asyncio
    async def test_empty_scrape_leaves_creator_stale(self, service, memory_store, mock_scraper, creator_factory):
        memory_store.add(creator_factory("c1", handle="quiet"))
        mock_scraper.scrape_tweets.side_effect = None
        mock_scraper.scrape_tweets.return_value = []

        result = await service.run_daily()

        assert result.summary == {"user_1": 0}
        assert memory_store.scraped == []
        assert memory_store.creators["c1"].last_scraped_at is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_provider_outage_is_retried_next_run(
        self, memory_store, ingestion_config, sleep, creator_factory
    ):
        memory_store.add(creator_factory("c1", handle="alice", requested=3))
        scraper = TwitterAPIScraper("key", retry_config=RetryConfig(max_retries=0))
        service = IngestionService(memory_store, scraper, config=ingestion_config, sleep=sleep)

        recovered = httpx.Response(
            200,
            json={
                "tweets": [{"id": "1", "text": "back online", "createdAt": "2026-03-10T10:00:00Z"}],
                "has_next_page": False,
            },
        )
        route = respx.get(SEARCH_URL).mock(side_effect=[httpx.Response(503), recovered])

        first = await service.run_daily()

        assert first.total_scraped == 0
        assert first.errors == []
        assert memory_store.scraped == []

        second = await service.run_daily()

        assert second.total_scraped == 1
        assert memory_store.scraped == ["c1"]
        assert route.call_count == 2


class TestScrapeCreator:
    @pytest.mark.asyncio
    async def test_uses_scaled_quota(self, service, memory_store, creator_factory):
        memory_store.add(creator_factory("c1", handle="alice", requested=10))
        memory_store.add(creator_factory("c2", handle="bob", requested=20))
        memory_store.daily_limits["user_1"] = 15

        result = await service.scrape_creator("c2")

        assert result.handle == "bob"
        assert result.requested_count == 20
        assert result.actual_count == 10
        assert result.was_scaled is True
        assert result.count == 10
        assert memory_store.scraped == ["c2"]

    @pytest.mark.asyncio
    async def test_unknown_creator(self, service):
        assert await service.scrape_creator("missing") is None

    @pytest.mark.asyncio
    async def test_paused_creator_uses_requested_count(self, service, memory_store, creator_factory):
        memory_store.add(creator_factory("c1", handle="alice", requested=7, is_active=False))

        result = await service.scrape_creator("c1")

        assert result.actual_count == 7
        assert result.was_scaled is False

    @pytest.mark.asyncio
    async def test_empty_manual_scrape_not_stamped(self, service, memory_store, mock_scraper, creator_factory):
        memory_store.add(creator_factory("c1", handle="alice", requested=5))
        mock_scraper.scrape_tweets.side_effect = None
        mock_scraper.scrape_tweets.return_value = []

        result = await service.scrape_creator("c1")

        assert result.count == 0
        assert memory_store.scraped == []
