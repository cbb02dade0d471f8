"""HTTP API for creator management, tweet samples and scheduled triggers."""

from creator_feed.api.app import create_app

__all__ = ["create_app"]
