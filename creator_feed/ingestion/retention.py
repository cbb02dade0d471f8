"""Retention sweep: drop creator tweets past the retention window."""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from creator_feed.ingestion.schemas import SweepResult
from creator_feed.observability.metrics import get_metrics
from creator_feed.storage.repository import TweetStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RetentionSweeper:
    """Deletes tweets published more than N days ago, across all users."""

    def __init__(
        self,
        store: TweetStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or _utcnow

    def cutoff(self, days_to_keep: int) -> datetime:
        return self._clock() - timedelta(days=days_to_keep)

    async def sweep(self, days_to_keep: int = 7) -> int:
        """Delete expired tweets and return how many were removed."""
        cutoff = self.cutoff(days_to_keep)
        started = time.monotonic()
        deleted = await self._store.delete_tweets_older_than(cutoff)
        get_metrics().record_sweep(deleted, time.monotonic() - started)
        logger.info(f"Deleted {deleted} tweets published before {cutoff.isoformat()}")
        return deleted

    async def preview(self, days_to_keep: int = 7) -> int:
        """Count what sweep() would delete without deleting it."""
        return await self._store.count_tweets_older_than(self.cutoff(days_to_keep))

    async def run_sweep(self, days_to_keep: int = 7) -> SweepResult:
        """
        Run a sweep for a scheduled trigger.

        Failures are reported in the result instead of raised, so the
        scheduler sees a completed call and does not retry.
        """
        started = time.monotonic()
        try:
            deleted = await self.sweep(days_to_keep)
        except Exception as e:
            get_metrics().sweep_failures.inc()
            logger.exception(f"Retention sweep failed: {e}")
            return SweepResult(
                success=False,
                error=str(e) or type(e).__name__,
                duration_ms=int((time.monotonic() - started) * 1000),
                timestamp=self._clock(),
            )

        return SweepResult(
            success=True,
            deleted_count=deleted,
            duration_ms=int((time.monotonic() - started) * 1000),
            timestamp=self._clock(),
        )
