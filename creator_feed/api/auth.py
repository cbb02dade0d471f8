"""
API authentication.

- X-API-KEY header for user-facing routes (dev mode when API_KEYS is unset)
- Authorization: Bearer <CRON_SECRET> for scheduled triggers
"""

import secrets

import structlog
from fastapi import Header, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from creator_feed.config.settings import get_settings

logger = structlog.get_logger(__name__)

# API key header scheme
api_key_header = APIKeyHeader(name="X-API-KEY", auto_error=False)


async def verify_api_key(api_key: str | None = Security(api_key_header)) -> str:
    """
    Verify API key from X-API-KEY header.

    Returns:
        The validated API key ("dev-mode" when no keys are configured)

    Raises:
        HTTPException: If API key is missing or invalid
    """
    settings = get_settings()

    if not settings.api_keys:
        return "dev-mode"

    if api_key is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key. Provide X-API-KEY header.",
        )

    valid_keys = [k.strip() for k in settings.api_keys.split(",") if k.strip()]
    if not valid_keys or api_key not in valid_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

    return api_key


async def verify_cron_secret(authorization: str | None = Header(default=None)) -> None:
    """
    Verify the scheduler's bearer token.

    Raises:
        HTTPException: 500 if CRON_SECRET is not configured, 401 if the
            Authorization header does not carry it
    """
    cron_secret = get_settings().cron_secret

    if not cron_secret:
        logger.error("CRON_SECRET environment variable not set")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error: CRON_SECRET not configured",
        )

    expected = f"Bearer {cron_secret}".encode()
    if authorization is None or not secrets.compare_digest(authorization.encode(), expected):
        logger.warning("Invalid or missing cron authorization header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized. Invalid CRON_SECRET.",
        )
