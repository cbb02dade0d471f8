"""
HTTP layer for tweet providers with bounded retry.

Provides:
- RetryConfig: Exponential backoff configuration
- HTTPClient: Async httpx client that retries 429/5xx and transport errors

Scrapers turn the HTTPClientError raised here into partial results or
validation messages; nothing from this module reaches API callers.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
RETRYABLE_EXCEPTIONS = (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError)


@dataclass
class RetryConfig:
    """
    Exponential backoff with jitter.

    Formula: min(max_backoff, base_delay * 2^attempt) * (1 + random(0, jitter_factor))
    """

    max_retries: int = 3
    max_backoff_seconds: float = 60.0
    base_delay: float = 1.0
    jitter_factor: float = 0.1

    def calculate_backoff(self, attempt: int) -> float:
        """Backoff in seconds before retry number `attempt` (0-indexed)."""
        delay = min(self.base_delay * (2**attempt), self.max_backoff_seconds)
        return delay + delay * self.jitter_factor * random.random()

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in RETRYABLE_STATUS_CODES

    def is_retryable_exception(self, exc: Exception) -> bool:
        return isinstance(exc, RETRYABLE_EXCEPTIONS)


class HTTPClientError(Exception):
    """Raised for non-2xx responses and exhausted retries."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(HTTPClientError):
    """Raised when the provider keeps answering 429 after all retries."""


class HTTPClient:
    """
    Async HTTP client with retry logic.

    Example:
        async with HTTPClient(RetryConfig(max_retries=2), timeout=30.0) as client:
            response = await client.get(url, params={"query": q}, headers=headers)
    """

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        timeout: float = 30.0,
    ):
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPClient":
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> httpx.Response:
        return await self.request(
            "POST", url, params=params, headers=headers, json_body=json_body
        )

    async def request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> httpx.Response:
        """
        Send a request, retrying retryable failures up to max_retries times.

        Raises:
            RateLimitError: 429 persisted through every attempt
            HTTPClientError: Any other failure
        """
        if not self._client:
            raise RuntimeError("HTTPClient must be used as async context manager")

        attempts = self.retry_config.max_retries + 1

        for attempt in range(attempts):
            try:
                response = await self._client.request(
                    method,
                    url,
                    params=params,
                    headers=headers,
                    json=json_body,
                )
            except RETRYABLE_EXCEPTIONS as e:
                if attempt < attempts - 1:
                    await self._backoff(attempt, f"{type(e).__name__}", url)
                    continue
                raise HTTPClientError(
                    f"Request failed after {attempt + 1} attempts: {e}"
                ) from e

            if self.retry_config.is_retryable_status(response.status_code):
                if attempt < attempts - 1:
                    await self._backoff(attempt, f"status {response.status_code}", url)
                    continue
                error_cls = RateLimitError if response.status_code == 429 else HTTPClientError
                raise error_cls(
                    f"Request failed with status {response.status_code} "
                    f"after {attempt + 1} attempts",
                    status_code=response.status_code,
                    response_body=response.text,
                )

            if response.status_code >= 400:
                raise HTTPClientError(
                    f"Request failed with status {response.status_code}",
                    status_code=response.status_code,
                    response_body=response.text,
                )

            return response

        # Unreachable: the loop either returns or raises
        raise HTTPClientError(f"Request failed after {attempts} attempts")

    async def _backoff(self, attempt: int, reason: str, url: str) -> None:
        backoff = self.retry_config.calculate_backoff(attempt)
        logger.warning(
            f"Retryable {reason} from {url}, "
            f"attempt {attempt + 1}/{self.retry_config.max_retries + 1}, "
            f"backing off {backoff:.2f}s"
        )
        await asyncio.sleep(backoff)
