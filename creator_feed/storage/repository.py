"""Database repository for creators, per-user budgets and creator tweets."""

import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING

from creator_feed.storage.database import Database
from creator_feed.storage.schemas import Creator, StoredTweet

if TYPE_CHECKING:
    from creator_feed.scrapers.schemas import ScrapedTweet

logger = logging.getLogger(__name__)

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS user_settings (
    user_id           TEXT PRIMARY KEY,
    daily_tweet_limit INTEGER NOT NULL,
    updated_at        TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS creators (
    id                    TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
    user_id               TEXT NOT NULL,
    handle                TEXT NOT NULL,
    is_active             BOOLEAN NOT NULL DEFAULT TRUE,
    requested_daily_count INTEGER NOT NULL DEFAULT 10,
    provider_user_id      TEXT,
    last_scraped_at       TIMESTAMPTZ,
    created_at            TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at            TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (user_id, handle)
);

CREATE INDEX IF NOT EXISTS idx_creators_user_active
    ON creators(user_id, is_active);
CREATE INDEX IF NOT EXISTS idx_creators_last_scraped
    ON creators(last_scraped_at);

CREATE TABLE IF NOT EXISTS creator_tweets (
    id            BIGSERIAL PRIMARY KEY,
    creator_id    TEXT NOT NULL REFERENCES creators(id) ON DELETE CASCADE,
    source_id     TEXT NOT NULL,
    content       TEXT NOT NULL,
    author_handle TEXT NOT NULL,
    published_at  TIMESTAMPTZ NOT NULL,
    metrics       JSONB NOT NULL DEFAULT '{}',
    scraped_at    TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (creator_id, source_id)
);

CREATE INDEX IF NOT EXISTS idx_creator_tweets_creator_published
    ON creator_tweets(creator_id, published_at DESC);
CREATE INDEX IF NOT EXISTS idx_creator_tweets_published
    ON creator_tweets(published_at);
"""

_CREATOR_COLUMNS = """
    id, user_id, handle, is_active, requested_daily_count,
    provider_user_id, last_scraped_at, created_at
"""

_UPSERT_CREATOR_SQL = f"""
INSERT INTO creators (user_id, handle, requested_daily_count, provider_user_id)
VALUES ($1, $2, $3, $4)
ON CONFLICT (user_id, handle) DO UPDATE SET
    is_active = TRUE,
    requested_daily_count = EXCLUDED.requested_daily_count,
    provider_user_id = COALESCE(EXCLUDED.provider_user_id, creators.provider_user_id),
    updated_at = NOW()
RETURNING {_CREATOR_COLUMNS}
"""

# Re-ingesting a tweet refreshes its text and counters, never duplicates it
_UPSERT_TWEETS_SQL = """
INSERT INTO creator_tweets (creator_id, source_id, content, author_handle, published_at, metrics)
SELECT $1::text, * FROM unnest(
    $2::text[], $3::text[], $4::text[], $5::timestamptz[], $6::jsonb[]
)
ON CONFLICT (creator_id, source_id) DO UPDATE SET
    content = EXCLUDED.content,
    metrics = EXCLUDED.metrics,
    scraped_at = NOW()
"""

_QUERY_CREATOR_TWEETS_SQL = """
SELECT source_id, creator_id, content, author_handle, published_at, metrics, scraped_at
FROM creator_tweets
WHERE creator_id = $1 AND published_at >= $2
ORDER BY published_at DESC
LIMIT $3
"""


def _record_to_creator(record) -> Creator:
    """Convert an asyncpg Record to a Creator dataclass."""
    return Creator(
        id=record["id"],
        user_id=record["user_id"],
        handle=record["handle"],
        is_active=record["is_active"],
        requested_daily_count=record["requested_daily_count"],
        provider_user_id=record["provider_user_id"],
        last_scraped_at=record["last_scraped_at"],
        created_at=record["created_at"],
    )


def _record_to_tweet(record) -> StoredTweet:
    metrics = record["metrics"]
    if isinstance(metrics, str):
        metrics = json.loads(metrics)
    return StoredTweet(
        source_id=record["source_id"],
        creator_id=record["creator_id"],
        content=record["content"],
        author_handle=record["author_handle"],
        published_at=record["published_at"],
        metrics=dict(metrics) if metrics else {},
        scraped_at=record["scraped_at"],
    )


def _affected_rows(status: str) -> int:
    """Parse the row count out of a status tag such as 'DELETE 12'."""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0


class TweetStore:
    """
    Persistence for creators, daily budgets and creator tweets.

    The ingestion subsystem only relies on four operations:
    list_active_creators, upsert_tweets, query_creator_tweets and
    delete_tweets_older_than. The rest backs the creator management API.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_tables(self) -> None:
        """Create tables and indexes (idempotent)."""
        await self._db.execute(_CREATE_TABLES_SQL)
        logger.info("Creator feed tables ensured")

    # ── Ingestion contract ──────────────────────────────────────

    async def list_active_creators(self, user_id: str) -> list[Creator]:
        """Active creators for a user, oldest first so ordering is stable."""
        rows = await self._db.fetch(
            f"""
            SELECT {_CREATOR_COLUMNS} FROM creators
            WHERE user_id = $1 AND is_active = TRUE
            ORDER BY created_at, id
            """,
            user_id,
        )
        return [_record_to_creator(r) for r in rows]

    async def upsert_tweets(self, creator_id: str, tweets: list["ScrapedTweet"]) -> int:
        """Insert or refresh tweets for a creator in one statement.

        A source_id repeated within the batch is written once, with its
        last occurrence winning. Returns the number of distinct tweets written.
        """
        if not tweets:
            return 0

        # ON CONFLICT cannot touch the same row twice in one statement
        tweets = list({t.source_id: t for t in tweets}.values())

        await self._db.execute(
            _UPSERT_TWEETS_SQL,
            creator_id,
            [t.source_id for t in tweets],
            [t.content for t in tweets],
            [t.author_handle for t in tweets],
            [t.published_at for t in tweets],
            [json.dumps(t.metrics) for t in tweets],
        )
        logger.debug("Upserted %d tweets for creator %s", len(tweets), creator_id)
        return len(tweets)

    async def query_creator_tweets(
        self,
        creator_id: str,
        since: datetime,
        limit: int,
    ) -> list[StoredTweet]:
        """Tweets published at or after `since`, most recent first."""
        rows = await self._db.fetch(_QUERY_CREATOR_TWEETS_SQL, creator_id, since, limit)
        return [_record_to_tweet(r) for r in rows]

    async def delete_tweets_older_than(self, cutoff: datetime) -> int:
        """Delete tweets published before `cutoff` across all creators."""
        status = await self._db.execute(
            "DELETE FROM creator_tweets WHERE published_at < $1",
            cutoff,
        )
        return _affected_rows(status)

    async def count_tweets_older_than(self, cutoff: datetime) -> int:
        return await self._db.fetchval(
            "SELECT COUNT(*) FROM creator_tweets WHERE published_at < $1",
            cutoff,
        ) or 0

    # ── Creators ────────────────────────────────────────────────

    async def add_creator(
        self,
        user_id: str,
        handle: str,
        requested_daily_count: int = 10,
        provider_user_id: str | None = None,
    ) -> Creator:
        """Track a handle for a user; re-adding reactivates it."""
        row = await self._db.fetchrow(
            _UPSERT_CREATOR_SQL,
            user_id,
            handle,
            requested_daily_count,
            provider_user_id,
        )
        return _record_to_creator(row)

    async def get_creator(self, creator_id: str) -> Creator | None:
        row = await self._db.fetchrow(
            f"SELECT {_CREATOR_COLUMNS} FROM creators WHERE id = $1",
            creator_id,
        )
        return _record_to_creator(row) if row else None

    async def list_creators(self, user_id: str) -> list[Creator]:
        """All creators for a user, active or paused."""
        rows = await self._db.fetch(
            f"""
            SELECT {_CREATOR_COLUMNS} FROM creators
            WHERE user_id = $1
            ORDER BY created_at DESC
            """,
            user_id,
        )
        return [_record_to_creator(r) for r in rows]

    async def toggle_creator(self, creator_id: str) -> Creator | None:
        """Flip is_active. Returns the updated creator, or None if missing."""
        row = await self._db.fetchrow(
            f"""
            UPDATE creators SET is_active = NOT is_active, updated_at = NOW()
            WHERE id = $1
            RETURNING {_CREATOR_COLUMNS}
            """,
            creator_id,
        )
        return _record_to_creator(row) if row else None

    async def update_requested_count(
        self, creator_id: str, requested_daily_count: int
    ) -> Creator | None:
        row = await self._db.fetchrow(
            f"""
            UPDATE creators SET requested_daily_count = $2, updated_at = NOW()
            WHERE id = $1
            RETURNING {_CREATOR_COLUMNS}
            """,
            creator_id,
            requested_daily_count,
        )
        return _record_to_creator(row) if row else None

    async def delete_creator(self, creator_id: str) -> bool:
        """Delete a creator and (by cascade) its tweets."""
        status = await self._db.execute("DELETE FROM creators WHERE id = $1", creator_id)
        return _affected_rows(status) > 0

    async def get_creators_needing_scraping(
        self, user_id: str, stale_before: datetime
    ) -> list[Creator]:
        """Active creators never scraped or last scraped before `stale_before`."""
        rows = await self._db.fetch(
            f"""
            SELECT {_CREATOR_COLUMNS} FROM creators
            WHERE user_id = $1
              AND is_active = TRUE
              AND (last_scraped_at IS NULL OR last_scraped_at < $2)
            ORDER BY last_scraped_at ASC NULLS FIRST, id
            """,
            user_id,
            stale_before,
        )
        return [_record_to_creator(r) for r in rows]

    async def mark_scraped(self, creator_id: str) -> None:
        await self._db.execute(
            "UPDATE creators SET last_scraped_at = NOW() WHERE id = $1",
            creator_id,
        )

    async def list_users_with_active_creators(self) -> list[str]:
        rows = await self._db.fetch(
            "SELECT DISTINCT user_id FROM creators WHERE is_active = TRUE ORDER BY user_id"
        )
        return [r["user_id"] for r in rows]

    # ── Budgets ─────────────────────────────────────────────────

    async def get_daily_limit(self, user_id: str) -> int | None:
        """The user's daily tweet budget, or None if never set."""
        return await self._db.fetchval(
            "SELECT daily_tweet_limit FROM user_settings WHERE user_id = $1",
            user_id,
        )

    async def set_daily_limit(self, user_id: str, daily_tweet_limit: int) -> None:
        await self._db.execute(
            """
            INSERT INTO user_settings (user_id, daily_tweet_limit)
            VALUES ($1, $2)
            ON CONFLICT (user_id) DO UPDATE SET
                daily_tweet_limit = EXCLUDED.daily_tweet_limit,
                updated_at = NOW()
            """,
            user_id,
            daily_tweet_limit,
        )
