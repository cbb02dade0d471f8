"""
Apify tweet source (apidojo/tweet-scraper actor).

Runs the actor synchronously through the REST API and reads the dataset
items from the same response. The actor honours maxItems itself, so a
scrape is always a single page with no cursor.
"""

import logging
from datetime import datetime
from typing import Any

from creator_feed.scrapers.base import (
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
    "likes": ("likeCount", "likes", "favorite_count"),
    "retweets": ("retweetCount", "retweets", "retweet_count"),
    "replies": ("replyCount", "replies", "reply_count"),
    "quotes": ("quoteCount",),
    "views": ("viewCount", "views"),
    "bookmarks": ("bookmarkCount",),
}


class ApifyScraper(TweetScraper):
    """Tweet source backed by an Apify actor run."""

    unavailable_message = (
        "Unable to validate Twitter handle. The account may be private, "
        "suspended, or temporarily unavailable."
    )

    @property
    def provider_name(self) -> str:
        return "Apify"

    @property
    def _run_url(self) -> str:
        return (
            f"{self._config.apify_base_url}/acts/"
            f"{self._config.apify_actor_id}/run-sync-get-dataset-items"
        )

    async def _run_actor(self, actor_input: dict[str, Any]) -> list[dict[str, Any]]:
        async with HTTPClient(
            self._retry_config, timeout=self._config.apify_timeout_seconds
        ) as client:
            response = await client.post(
                self._run_url,
                params={"token": self._api_key},
                json_body=actor_input,
            )
        items = response.json()
        if not isinstance(items, list):
            raise ProviderRequestError("Actor run returned an unexpected payload")
        # The actor emits {"noResults": true} placeholders for empty runs
        return [item for item in items if isinstance(item, dict) and not item.get("noResults")]

    def build_query(
        self,
        handle: str,
        max_items: int,
        since: datetime,
        until: datetime,
    ) -> ProviderQuery:
        return ProviderQuery(
            handle=handle,
            params={
                "twitterHandles": [handle],
                "maxItems": max_items,
                "sort": "Latest",
                "startDate": since.date().isoformat(),
                "endDate": until.date().isoformat(),
            },
        )

    async def fetch_page(self, query: ProviderQuery, cursor: str | None) -> TweetPage:
        try:
            raw_items = await self._run_actor(query.params)
        except HTTPClientError as e:
            raise ProviderRequestError(
                f"Actor run failed: {e}", status_code=e.status_code
            ) from e
        except ValueError as e:
            raise ProviderRequestError(f"Actor run returned invalid JSON: {e}") from e

        items = [
            tweet
            for tweet in (self._to_scraped_tweet(raw, query.handle) for raw in raw_items)
            if tweet is not None
        ]
        return TweetPage(items=items, has_more=False, next_cursor=None)

    def _to_scraped_tweet(self, raw: dict[str, Any], handle: str) -> ScrapedTweet | None:
        tweet_id = raw.get("id") or raw.get("tweetId") or raw.get("id_str")
        if not tweet_id:
            return None
        author = raw.get("author") or {}
        return ScrapedTweet(
            source_id=str(tweet_id),
            content=raw.get("text") or raw.get("full_text") or "",
            author_handle=display_handle(author.get("userName") or handle),
            published_at=parse_tweet_timestamp(raw.get("createdAt") or raw.get("created_at")),
            metrics=collect_metrics(raw, _METRIC_FIELDS),
        )

    async def _lookup_handle(self, handle: str) -> HandleValidation:
        items = await self._run_actor({"twitterHandles": [handle], "maxItems": 1})

        if not items:
            return HandleValidation(
                valid=False,
                error="Twitter account not found or has no tweets.",
            )

        author = items[0].get("author") or {}
        user_id = author.get("id") or author.get("id_str")
        return HandleValidation(
            valid=True,
            provider_user_id=str(user_id) if user_id else None,
        )
