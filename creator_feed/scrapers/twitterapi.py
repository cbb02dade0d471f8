"""
twitterapi.io tweet source.

Uses the advanced search endpoint with a date-windowed `from:` query and
cursor pagination, and the user_about endpoint for handle validation.

Pricing is per tweet returned plus a smaller charge per empty call, so
the page loop stops as soon as max_items is reached.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from creator_feed.scrapers.base import (
    ACCOUNT_NOT_FOUND_MESSAGE,
    ProviderRequestError,
    TweetScraper,
    collect_metrics,
    parse_tweet_timestamp,
)
from creator_feed.scrapers.handles import display_handle
from creator_feed.scrapers.http_client import HTTPClient, HTTPClientError
from creator_feed.scrapers.schemas import (
    HandleValidation,
    ProviderQuery,
    ScrapedTweet,
    TweetPage,
)

logger = logging.getLogger(__name__)

_METRIC_FIELDS = {
    "likes": ("likeCount",),
    "retweets": ("retweetCount",),
    "replies": ("replyCount",),
    "quotes": ("quoteCount",),
    "views": ("viewCount",),
    "bookmarks": ("bookmarkCount",),
}


def format_query_date(value: datetime) -> str:
    """Format a datetime the way the search syntax expects: YYYY-MM-DD_HH:MM:SS_UTC."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d_%H:%M:%S_UTC")


class TwitterAPIScraper(TweetScraper):
    """
    Tweet source backed by twitterapi.io.

    Search response shape:
        {"tweets": [...], "has_next_page": bool, "next_cursor": str}
    user_about response shape:
        {"status": "success" | "error", "msg": str, "data": {"id": ...}}
    A 400 from user_about means the account does not exist.
    """

    @property
    def provider_name(self) -> str:
        return "TwitterAPI.io"

    @property
    def _headers(self) -> dict[str, str]:
        return {"X-API-Key": self._api_key, "Content-Type": "application/json"}

    def _client(self) -> HTTPClient:
        return HTTPClient(self._retry_config, timeout=self._config.request_timeout_seconds)

    def build_query(
        self,
        handle: str,
        max_items: int,
        since: datetime,
        until: datetime,
    ) -> ProviderQuery:
        search = (
            f"from:{handle} "
            f"since:{format_query_date(since)} "
            f"until:{format_query_date(until)}"
        )
        return ProviderQuery(handle=handle, params={"query": search, "queryType": "Latest"})

    async def fetch_page(self, query: ProviderQuery, cursor: str | None) -> TweetPage:
        params = dict(query.params)
        if cursor:
            params["cursor"] = cursor

        url = f"{self._config.twitterapi_base_url}/tweet/advanced_search"
        try:
            async with self._client() as client:
                response = await client.get(url, params=params, headers=self._headers)
            data = response.json()
        except HTTPClientError as e:
            raise ProviderRequestError(
                f"advanced_search failed: {e}", status_code=e.status_code
            ) from e
        except ValueError as e:
            raise ProviderRequestError(f"advanced_search returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProviderRequestError("advanced_search returned an unexpected payload")

        raw_tweets = data.get("tweets") or []
        items = [
            tweet
            for tweet in (self._to_scraped_tweet(raw, query.handle) for raw in raw_tweets)
            if tweet is not None
        ]
        return TweetPage(
            items=items,
            has_more=bool(data.get("has_next_page")),
            next_cursor=data.get("next_cursor") or None,
        )

    def _to_scraped_tweet(self, raw: dict[str, Any], handle: str) -> ScrapedTweet | None:
        tweet_id = raw.get("id")
        if not tweet_id:
            return None
        return ScrapedTweet(
            source_id=str(tweet_id),
            content=raw.get("text") or "",
            author_handle=display_handle(handle),
            published_at=parse_tweet_timestamp(raw.get("createdAt")),
            metrics=collect_metrics(raw, _METRIC_FIELDS),
        )

    async def _lookup_handle(self, handle: str) -> HandleValidation:
        url = f"{self._config.twitterapi_base_url}/user_about"
        try:
            async with self._client() as client:
                response = await client.get(
                    url, params={"userName": handle}, headers=self._headers
                )
        except HTTPClientError as e:
            if e.status_code == 400:
                logger.info(f"[{self.provider_name}] @{handle} not found")
                return HandleValidation(valid=False, error=ACCOUNT_NOT_FOUND_MESSAGE)
            raise

        data = response.json()
        user = data.get("data") or {}
        if data.get("status") != "success" or not user.get("id"):
            return HandleValidation(
                valid=False,
                error=data.get("msg") or ACCOUNT_NOT_FOUND_MESSAGE,
            )

        return HandleValidation(valid=True, provider_user_id=str(user["id"]))
