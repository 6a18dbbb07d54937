"""Caching infrastructure."""

from forum_engine.infrastructure.cache.ttl_cache import CacheEntry, TTLCache

__all__ = ["CacheEntry", "TTLCache"]
