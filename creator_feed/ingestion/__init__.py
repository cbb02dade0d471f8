"""Creator tweet ingestion: budget allocation, daily runs, sampling and retention."""

from creator_feed.ingestion.allocation import allocate_quotas, quota_requests, total_requested
from creator_feed.ingestion.config import IngestionConfig
from creator_feed.ingestion.retention import RetentionSweeper
from creator_feed.ingestion.sampling import BalancedSampler
from creator_feed.ingestion.schemas import (
    AllocatedQuota,
    CreatorQuotaRequest,
    CreatorScrapeResult,
    IngestionRunResult,
    SampledTweet,
    SweepResult,
)
from creator_feed.ingestion.service import IngestionService

__all__ = [
    "AllocatedQuota",
    "BalancedSampler",
    "CreatorQuotaRequest",
    "CreatorScrapeResult",
    "IngestionConfig",
    "IngestionRunResult",
    "IngestionService",
    "RetentionSweeper",
    "SampledTweet",
    "SweepResult",
    "allocate_quotas",
    "quota_requests",
    "total_requested",
]
