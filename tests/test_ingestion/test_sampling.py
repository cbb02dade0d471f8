"""Tests for balanced tweet sampling."""

import random
from collections import Counter
from datetime import datetime, timedelta

import pytest

from creator_feed.ingestion.sampling import BalancedSampler


class TestBalancedSampler:
    """Tests for BalancedSampler.sample."""

    @pytest.mark.asyncio
    async def test_one_capped_query_per_creator(self, seeded_store, now):
        """3 creators, limit 50, 30 days: exactly 3 queries of 17."""
        sampler = BalancedSampler(seeded_store, rng=random.Random(1), clock=lambda: now)

        await sampler.sample("user_1", limit=50, days_back=30)

        assert [(cid, lim) for cid, _, lim in seeded_store.query_calls] == [
            ("c_alice", 17),
            ("c_bob", 17),
            ("c_carol", 17),
        ]
        assert {since for _, since, _ in seeded_store.query_calls} == {now - timedelta(days=30)}

    @pytest.mark.asyncio
    async def test_no_backfill_from_busy_creators(self, seeded_store, now):
        """Available {17, 5, 0} with limit 50 yields 22."""
        sampler = BalancedSampler(seeded_store, rng=random.Random(1), clock=lambda: now)

        tweets = await sampler.sample("user_1", limit=50, days_back=30)

        assert len(tweets) == 22
        assert Counter(t.author for t in tweets) == {"@alice": 17, "@bob": 5}

    @pytest.mark.asyncio
    async def test_no_active_creators_issues_no_queries(self, memory_store):
        sampler = BalancedSampler(memory_store)

        tweets = await sampler.sample("nobody", limit=50, days_back=30)

        assert tweets == []
        assert memory_store.query_calls == []

    @pytest.mark.asyncio
    async def test_truncates_to_limit(self, seeded_store, now):
        sampler = BalancedSampler(seeded_store, rng=random.Random(3), clock=lambda: now)

        tweets = await sampler.sample("user_1", limit=4, days_back=30)

        # ceil(4 / 3) = 2 per creator, 4 gathered, 4 returned
        assert len(tweets) == 4
        assert {lim for _, _, lim in seeded_store.query_calls} == {2}

    @pytest.mark.asyncio
    async def test_window_excludes_old_tweets(self, seeded_store, now):
        sampler = BalancedSampler(seeded_store, rng=random.Random(1), clock=lambda: now)

        tweets = await sampler.sample("user_1", limit=50, days_back=2)

        # bob's tweets are 1..5 days old; only 2 fall inside the window
        assert Counter(t.author for t in tweets)["@bob"] == 2

    @pytest.mark.asyncio
    async def test_shuffle_mixes_authors(self, memory_store, creator_factory, tweet_factory, now):
        for handle in ("alice", "bob", "carol"):
            memory_store.add(creator_factory(f"c_{handle}", handle=handle))
        for handle in ("alice", "bob", "carol"):
            await memory_store.upsert_tweets(
                f"c_{handle}",
                [
                    tweet_factory(f"{handle}{i}", handle=handle, published_at=now - timedelta(hours=i))
                    for i in range(17)
                ],
            )
        seeds = range(300)
        mixed = 0
        for seed in seeds:
            sampler = BalancedSampler(memory_store, rng=random.Random(seed), clock=lambda: now)
            tweets = await sampler.sample("user_1", limit=50, days_back=30)

            assert len(tweets) == 50
            if len({t.author for t in tweets[:10]}) > 1:
                mixed += 1

        # Ten from one author out of 17+17+17 happens ~1 in 200,000 shuffles
        assert mixed >= 0.99 * len(seeds)

    @pytest.mark.asyncio
    async def test_same_seed_same_sample(self, seeded_store, now):
        first = await BalancedSampler(seeded_store, rng=random.Random(7), clock=lambda: now).sample("user_1")
        second = await BalancedSampler(seeded_store, rng=random.Random(7), clock=lambda: now).sample("user_1")

        assert [t.content for t in first] == [t.content for t in second]

    @pytest.mark.asyncio
    async def test_output_shape(self, seeded_store, now):
        sampler = BalancedSampler(seeded_store, rng=random.Random(1), clock=lambda: now)

        tweet = (await sampler.sample("user_1", limit=1, days_back=30))[0]

        assert set(tweet.to_dict()) == {"content", "author", "published_at", "metrics"}
        assert datetime.fromisoformat(tweet.published_at).tzinfo is not None
        assert tweet.metrics == {"likes": 1, "retweets": 0, "replies": 0}

    @pytest.mark.asyncio
    async def test_non_positive_limit(self, seeded_store):
        assert await BalancedSampler(seeded_store).sample("user_1", limit=0) == []
        assert seeded_store.query_calls == []
