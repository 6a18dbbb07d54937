"""TTL cache.

A small in-memory cache whose lifetime is set at construction and whose
clock is injected, so expiry is deterministic under a fake time authority.
A TTL of zero disables caching.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, TypeVar

import structlog

from forum_engine.application.ports.time_authority import TimeAuthorityProtocol

logger = structlog.get_logger(__name__)

K = TypeVar("K")
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """Cached value with the time it was stored."""

    data: V
    cached_at: datetime

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        return now >= self.cached_at + ttl


class TTLCache(Generic[K, V]):
    """In-memory key/value cache with a fixed time-to-live."""

    def __init__(
        self,
        ttl_seconds: int,
        time_authority: TimeAuthorityProtocol,
        name: str = "cache",
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Entry lifetime. Zero disables caching.
            time_authority: Clock used to stamp and expire entries.
            name: Label used in log entries.
        """
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        self._ttl = timedelta(seconds=ttl_seconds)
        self._time = time_authority
        self._entries: dict[K, CacheEntry[V]] = {}
        self._log = logger.bind(component="ttl_cache", cache=name)

    @property
    def enabled(self) -> bool:
        return self._ttl > timedelta(0)

    def get(self, key: K) -> V | None:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._log.debug("cache_miss", key=str(key))
            return None
        if entry.is_expired(self._time.now(), self._ttl):
            self._log.debug("cache_expired", key=str(key))
            del self._entries[key]
            return None
        self._log.debug("cache_hit", key=str(key))
        return entry.data

    def set(self, key: K, data: V) -> None:
        if not self.enabled:
            return
        self._entries[key] = CacheEntry(data=data, cached_at=self._time.now())

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all entries."""
        count = len(self._entries)
        self._entries.clear()
        self._log.info("cache_cleared", entries_cleared=count)

    def __len__(self) -> int:
        return len(self._entries)
