"""Observability layer - logging and metrics."""

from creator_feed.observability.logging import setup_logging
from creator_feed.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
