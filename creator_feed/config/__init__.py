"""Configuration module for creator-feed."""

from creator_feed.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
