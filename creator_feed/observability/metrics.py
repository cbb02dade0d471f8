"""
Prometheus metrics for the creator-feed ingestion pipeline.

Tracks provider traffic (pages, tweets, errors), budget scaling,
and retention sweeps. Exposed over HTTP for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from creator_feed.config.settings import get_settings

logger = logging.getLogger(__name__)

# Provider calls can be slow (Apify runs the actor synchronously)
PROVIDER_LATENCY_BUCKETS = (0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0)


class MetricsCollector:
    """
    Prometheus metrics collector for creator-feed.

    Usage:
        metrics = get_metrics()
        metrics.record_page("twitterapi", items=20, latency=0.8)
        metrics.record_provider_error("twitterapi", "http_500")
    """

    def __init__(self):
        self.provider_pages = Counter(
            "creator_feed_provider_pages_total",
            "Total page requests issued to the tweet provider",
            ["provider"],
        )

        self.tweets_scraped = Counter(
            "creator_feed_tweets_scraped_total",
            "Total tweets returned by the tweet provider",
            ["provider"],
        )

        self.provider_errors = Counter(
            "creator_feed_provider_errors_total",
            "Total provider failures (absorbed, not raised)",
            ["provider", "error_type"],
        )

        self.provider_latency = Histogram(
            "creator_feed_provider_latency_seconds",
            "Time per provider page request",
            ["provider"],
            buckets=PROVIDER_LATENCY_BUCKETS,
        )

        self.quotas_scaled = Counter(
            "creator_feed_quotas_scaled_total",
            "Creators whose daily quota was scaled down to fit the user budget",
        )

        self.tweets_deleted = Counter(
            "creator_feed_tweets_deleted_total",
            "Total tweets removed by retention sweeps",
        )

        self.sweep_failures = Counter(
            "creator_feed_sweep_failures_total",
            "Retention sweeps that raised",
        )

        self.sweep_duration = Histogram(
            "creator_feed_sweep_duration_seconds",
            "Time per retention sweep",
            buckets=(0.05, 0.1, 0.5, 1.0, 5.0, 15.0, 60.0),
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        port = port or get_settings().metrics_port
        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    def record_page(self, provider: str, items: int, latency: float | None = None) -> None:
        """Record one provider page and the tweets it carried."""
        self.provider_pages.labels(provider=provider).inc()
        if items:
            self.tweets_scraped.labels(provider=provider).inc(items)
        if latency is not None:
            self.provider_latency.labels(provider=provider).observe(latency)

    def record_provider_error(self, provider: str, error_type: str) -> None:
        self.provider_errors.labels(provider=provider, error_type=error_type).inc()

    def record_sweep(self, deleted: int, duration: float | None = None) -> None:
        if deleted:
            self.tweets_deleted.inc(deleted)
        if duration is not None:
            self.sweep_duration.observe(duration)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
