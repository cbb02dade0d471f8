"""
Command-line interface for creator-feed.

Usage:
    creator-feed serve                 # Run the API server
    creator-feed init-db               # Create tables
    creator-feed scrape [--user ID]    # Run the daily scrape now
    creator-feed cleanup --days 7      # Retention sweep
    creator-feed sample --user ID      # Print a balanced sample
    creator-feed validate HANDLE       # Check a handle with the provider
    creator-feed health                # Check dependencies
"""

import asyncio
import json
import os
import sys

import click

from creator_feed.config.settings import get_settings
from creator_feed.observability.logging import bind_run_context, clear_run_context, setup_logging
from creator_feed.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Creator Feed - daily creator tweet ingestion and sampling."""
    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics/--no-metrics", default=True, help="Enable metrics server")
def serve(host: str | None, port: int | None, reload: bool, metrics: bool) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    if metrics:
        get_metrics().start_server()
        click.echo(f"Metrics available on http://localhost:{settings.metrics_port}/metrics")

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "creator_feed.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema."""
    from creator_feed.storage.database import Database
    from creator_feed.storage.repository import TweetStore

    async def run():
        async with Database() as db:
            await TweetStore(db).create_tables()
        click.echo("Database initialized successfully")

    asyncio.run(run())


@main.command()
@click.option("--user", "user_id", default=None, help="Only scrape this user's creators")
def scrape(user_id: str | None) -> None:
    """Scrape stale creators within each user's daily budget.

    Example:
        creator-feed scrape                 # All users with active creators
        creator-feed scrape --user u_123    # One user
    """
    from creator_feed.ingestion.service import IngestionService
    from creator_feed.scrapers.base import ScraperConfigurationError
    from creator_feed.scrapers.factory import create_scraper
    from creator_feed.storage.database import Database
    from creator_feed.storage.repository import TweetStore

    try:
        scraper = create_scraper()
    except ScraperConfigurationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    async def run():
        async with Database() as db:
            service = IngestionService(TweetStore(db), scraper)
            bind_run_context(command="scrape", provider=scraper.provider_name)
            try:
                return await service.run_daily([user_id] if user_id else None)
            finally:
                clear_run_context()

    result = asyncio.run(run())

    click.echo(f"\nScraped {result.total_scraped} tweets for {result.users} users")
    for uid, count in result.summary.items():
        click.echo(f"  {uid}: {count}")
    if result.errors:
        click.echo(click.style(f"\n{len(result.errors)} errors:", fg="yellow"))
        for error in result.errors:
            target = error.get("creator") or error.get("user")
            click.echo(f"  {target}: {error['error']}")


@main.command()
@click.option("--days", default=7, help="Days of tweets to keep")
@click.option("--dry-run", is_flag=True, help="Show count without deleting")
def cleanup(days: int, dry_run: bool) -> None:
    """Remove creator tweets older than the given number of days.

    Example:
        creator-feed cleanup --days 7              # Delete tweets older than 7 days
        creator-feed cleanup --days 7 --dry-run    # Preview without deleting
    """
    from creator_feed.ingestion.retention import RetentionSweeper
    from creator_feed.storage.database import Database
    from creator_feed.storage.repository import TweetStore

    async def run():
        async with Database() as db:
            sweeper = RetentionSweeper(TweetStore(db))
            cutoff = sweeper.cutoff(days)

            if dry_run:
                count = await sweeper.preview(days)
                click.echo(f"\nDry run - would delete {count} tweets older than {days} days")
                click.echo(f"Cutoff: {cutoff.isoformat()}")
                click.echo("\nRun without --dry-run to actually delete.")
            else:
                deleted = await sweeper.sweep(days)
                click.echo(f"\nDeleted {deleted} tweets older than {days} days")
                click.echo(f"Cutoff: {cutoff.isoformat()}")

    asyncio.run(run())


@main.command()
@click.option("--user", "user_id", required=True, help="User to sample for")
@click.option("--limit", default=None, type=int, help="Sample size")
@click.option("--days-back", default=None, type=int, help="Look-back window in days")
@click.option("--seed", default=None, type=int, help="Seed the shuffle for a repeatable sample")
def sample(user_id: str, limit: int | None, days_back: int | None, seed: int | None) -> None:
    """Print a balanced sample of a user's creator tweets as JSON."""
    import random

    from creator_feed.ingestion.config import IngestionConfig
    from creator_feed.ingestion.sampling import BalancedSampler
    from creator_feed.storage.database import Database
    from creator_feed.storage.repository import TweetStore

    config = IngestionConfig()
    rng = random.Random(seed) if seed is not None else None

    async def run():
        async with Database() as db:
            sampler = BalancedSampler(TweetStore(db), rng=rng)
            return await sampler.sample(
                user_id,
                limit=limit or config.sample_limit,
                days_back=days_back or config.sample_days_back,
            )

    tweets = asyncio.run(run())
    click.echo(json.dumps([t.to_dict() for t in tweets], indent=2))


@main.command()
@click.argument("handle")
def validate(handle: str) -> None:
    """Check that HANDLE exists with the configured provider."""
    from creator_feed.scrapers.base import ScraperConfigurationError
    from creator_feed.scrapers.factory import create_scraper

    try:
        scraper = create_scraper()
    except ScraperConfigurationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    result = asyncio.run(scraper.validate_handle(handle))

    if result.valid:
        click.echo(click.style(f"✓ {handle} is valid (user id {result.provider_user_id})", fg="green"))
    else:
        click.echo(click.style(f"✗ {handle}: {result.error}", fg="red"))
        sys.exit(1)


@main.command()
def health() -> None:
    """Check health of all dependencies."""
    import structlog
    logger = structlog.get_logger()

    async def check():
        results: dict[str, bool] = {}

        try:
            from creator_feed.storage.database import Database
            async with Database() as db:
                results["postgres"] = await db.health_check()
        except Exception as e:
            results["postgres"] = False
            logger.error("Postgres health check failed", error=str(e))

        settings = get_settings()
        results[f"{settings.scraper_provider}_configured"] = settings.scraper_configured
        results["cron_secret_configured"] = bool(settings.cron_secret)

        click.echo("\nHealth Check Results:")
        click.echo("-" * 40)

        for name, status in results.items():
            icon = "✓" if status else "✗"
            color = "green" if status else "red"
            click.echo(click.style(f"  {icon} {name}: {status}", fg=color))

        click.echo("-" * 40)

        if all(results.values()):
            click.echo(click.style("All services healthy!", fg="green"))
            sys.exit(0)
        else:
            click.echo(click.style("Some checks failed!", fg="red"))
            sys.exit(1)

    asyncio.run(check())


if __name__ == "__main__":
    main()
