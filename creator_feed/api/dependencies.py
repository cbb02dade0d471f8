"""
Dependency injection for FastAPI endpoints.

The database pool and the tweet scraper are built once per process on
first use and released by cleanup_dependencies() at shutdown. Services
receive them as arguments and never look them up themselves.
"""

from fastapi import Depends

from creator_feed.ingestion.config import IngestionConfig
from creator_feed.ingestion.retention import RetentionSweeper
from creator_feed.ingestion.sampling import BalancedSampler
from creator_feed.ingestion.service import IngestionService
from creator_feed.scrapers.base import TweetScraper
from creator_feed.scrapers.factory import create_scraper
from creator_feed.storage.database import Database
from creator_feed.storage.repository import TweetStore

# Global instances (initialized on first request)
_database: Database | None = None
_scraper: TweetScraper | None = None
_ingestion_config: IngestionConfig | None = None


async def get_database() -> Database:
    """Get the shared database pool, connecting on first use."""
    global _database

    if _database is None:
        database = Database()
        await database.connect()
        _database = database

    return _database


async def get_tweet_store(db: Database = Depends(get_database)) -> TweetStore:
    return TweetStore(db)


def get_ingestion_config() -> IngestionConfig:
    global _ingestion_config

    if _ingestion_config is None:
        _ingestion_config = IngestionConfig()

    return _ingestion_config


def get_scraper() -> TweetScraper:
    """
    Get the process-wide tweet scraper.

    Raises:
        ScraperConfigurationError: The selected provider has no API key
    """
    global _scraper

    if _scraper is None:
        _scraper = create_scraper()

    return _scraper


async def get_sampler(store: TweetStore = Depends(get_tweet_store)) -> BalancedSampler:
    return BalancedSampler(store)


async def get_retention_sweeper(
    store: TweetStore = Depends(get_tweet_store),
) -> RetentionSweeper:
    return RetentionSweeper(store)


async def get_ingestion_service(
    store: TweetStore = Depends(get_tweet_store),
    scraper: TweetScraper = Depends(get_scraper),
    config: IngestionConfig = Depends(get_ingestion_config),
) -> IngestionService:
    return IngestionService(store, scraper, config=config)


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _database, _scraper, _ingestion_config

    _scraper = None
    _ingestion_config = None

    if _database is not None:
        await _database.close()
        _database = None
