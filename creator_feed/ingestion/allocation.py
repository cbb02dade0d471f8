"""
Daily budget allocation across a user's creators.

When the requested counts fit in the user's daily limit they are used
unchanged. Otherwise every creator is scaled by limit / total and
floored, with a floor of one tweet so no active creator is starved.
Because of that floor the allocated sum can exceed the limit when many
creators share a small budget; flooring can also leave it short.
"""

import logging
import math
from collections.abc import Iterable

from creator_feed.ingestion.schemas import AllocatedQuota, CreatorQuotaRequest
from creator_feed.observability.metrics import get_metrics
from creator_feed.storage.schemas import Creator

logger = logging.getLogger(__name__)


def total_requested(creators: Iterable[CreatorQuotaRequest]) -> int:
    """Sum of requested counts over active creators."""
    return sum(c.requested_count for c in creators if c.is_active)


def quota_requests(creators: Iterable[Creator]) -> list[CreatorQuotaRequest]:
    """Project stored creators onto allocator input."""
    return [
        CreatorQuotaRequest(
            creator_id=c.id,
            handle=c.handle,
            requested_count=c.requested_daily_count,
            is_active=c.is_active,
        )
        for c in creators
    ]


def allocate_quotas(
    creators: list[CreatorQuotaRequest],
    daily_limit: int,
) -> list[AllocatedQuota]:
    """
    Allocate today's per-creator tweet counts within a daily limit.

    Args:
        creators: Creators in the order quotas should be returned
        daily_limit: The user's daily tweet budget

    Returns:
        One AllocatedQuota per eligible creator. Inactive creators and
        creators requesting nothing are left out. A non-positive limit
        yields no allocation at all.
    """
    if daily_limit <= 0:
        logger.warning(f"Daily tweet limit is {daily_limit}; nothing will be allocated")
        return []

    eligible: list[CreatorQuotaRequest] = []
    for creator in creators:
        if not creator.is_active:
            continue
        if creator.requested_count <= 0:
            logger.warning(
                f"Creator @{creator.handle} requests {creator.requested_count} tweets; skipping"
            )
            continue
        eligible.append(creator)

    if not eligible:
        return []

    total = total_requested(eligible)
    if total <= daily_limit:
        return [
            AllocatedQuota(
                creator_id=c.creator_id,
                handle=c.handle,
                requested_count=c.requested_count,
                actual_count=c.requested_count,
                was_scaled=False,
            )
            for c in eligible
        ]

    factor = daily_limit / total
    quotas = [
        AllocatedQuota(
            creator_id=c.creator_id,
            handle=c.handle,
            requested_count=c.requested_count,
            actual_count=max(1, math.floor(c.requested_count * factor)),
            was_scaled=True,
        )
        for c in eligible
    ]

    get_metrics().quotas_scaled.inc(len(quotas))
    logger.info(
        f"Scaled {len(quotas)} creators from {total} requested tweets "
        f"to {sum(q.actual_count for q in quotas)} (limit {daily_limit})"
    )
    return quotas
