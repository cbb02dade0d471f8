"""
Balanced tweet sampling across a user's active creators.

Each creator contributes at most ceil(limit / n) of its most recent
tweets in the window, so one prolific creator cannot crowd out the
rest. Quiet creators leave their share unused; the sample is not
backfilled from busier ones.
"""

import logging
import math
import random
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from creator_feed.ingestion.schemas import SampledTweet
from creator_feed.storage.repository import TweetStore
from creator_feed.storage.schemas import StoredTweet

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BalancedSampler:
    """
    Draws a shuffled, per-creator-capped sample of recent tweets.

    Args:
        store: Tweet store to read creators and tweets from
        rng: Source of shuffle randomness (seed it for reproducible samples)
        clock: Returns the current time; used for the look-back cutoff
    """

    def __init__(
        self,
        store: TweetStore,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._rng = rng or random.Random()
        self._clock = clock or _utcnow

    async def sample(self, user_id: str, limit: int = 50, days_back: int = 30) -> list[SampledTweet]:
        """Return up to `limit` tweets from `user_id`'s active creators."""
        if limit <= 0:
            return []

        creators = await self._store.list_active_creators(user_id)
        if not creators:
            logger.info(f"No active creators for user {user_id}; empty sample")
            return []

        per_creator = math.ceil(limit / len(creators))
        since = self._clock() - timedelta(days=days_back)

        pool: list[StoredTweet] = []
        for creator in creators:
            tweets = await self._store.query_creator_tweets(creator.id, since, per_creator)
            pool.extend(tweets)

        self._rng.shuffle(pool)
        sample = pool[:limit]

        distribution = Counter(t.author_handle for t in sample)
        logger.info(
            f"Sampled {len(sample)} tweets for user {user_id} from {len(creators)} creators "
            f"(up to {per_creator} each, {days_back} days): {dict(distribution)}"
        )
        return [SampledTweet.from_stored(t) for t in sample]
