"""creator-feed: creator tweet ingestion, budgeting, and balanced sampling."""

__version__ = "0.1.0"
