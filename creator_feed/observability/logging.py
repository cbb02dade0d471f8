"""
Structured logging configuration using structlog.

Production runs emit one JSON object per line so scraper runs and cron
sweeps can be filtered by handle/provider in the log aggregator.
Development runs use the coloured console renderer.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from creator_feed.config.settings import get_settings

# Libraries that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "asyncpg", "uvicorn.access")


def setup_logging(level: str | None = None) -> None:
    """
    Configure structlog and stdlib logging for the process.

    Args:
        level: Override for settings.log_level (e.g. from --debug)

    Usage:
        setup_logging()
        logger = structlog.get_logger()
        logger.info("Scraping creator", handle="@jack", provider="twitterapi")
    """
    settings = get_settings()
    log_level = level or settings.log_level

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        renderer: Processor = structlog.processors.JSONRenderer()
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            renderer,
        ]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        processors = shared_processors + [renderer]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level),
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_run_context(**kwargs) -> None:
    """
    Bind fields (run_id, user_id, ...) to every log line of the current task.

    Cleared with clear_run_context() once the run finishes.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_run_context() -> None:
    """Drop all fields bound with bind_run_context()."""
    structlog.contextvars.clear_contextvars()
