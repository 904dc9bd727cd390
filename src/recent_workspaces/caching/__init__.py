"""Freshness-aware caching."""

from .timestamp_cache import UNKNOWN_MTIME, CacheEntry, TimestampCache

__all__ = ["TimestampCache", "CacheEntry", "UNKNOWN_MTIME"]
