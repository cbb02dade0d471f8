"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from creator_feed import __version__
from creator_feed.api.dependencies import cleanup_dependencies, get_scraper
from creator_feed.api.routes import creators, cron, health, tweets, user_settings
from creator_feed.config.settings import get_settings

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info("Creator feed API starting up", provider=settings.scraper_provider)

    # A missing provider key aborts startup
    scraper = app.dependency_overrides.get(get_scraper, get_scraper)()
    logger.info("Tweet provider ready", provider_name=scraper.provider_name)

    yield

    logger.info("Creator feed API shutting down")
    await cleanup_dependencies()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "creators", "description": "Tracked creator management"},
        {"name": "settings", "description": "Per-user daily tweet budget"},
        {"name": "tweets", "description": "Balanced tweet samples"},
        {"name": "cron", "description": "Scheduled scrape and cleanup triggers"},
    ]

    app = FastAPI(
        title="Creator Feed API",
        description="""
Scrapes recent tweets from the creators each user follows, within a daily
budget, and serves balanced samples of them.

## Authentication

User routes require the `X-API-KEY` header (open when `API_KEYS` is unset).
Cron routes require `Authorization: Bearer <CRON_SECRET>`.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    # Request logging and correlation ID middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(creators.router, tags=["creators"])
    app.include_router(user_settings.router, tags=["settings"])
    app.include_router(tweets.router, tags=["tweets"])
    app.include_router(cron.router, tags=["cron"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "Creator Feed API",
            "version": __version__,
            "docs": "/docs",
        }

    return app
