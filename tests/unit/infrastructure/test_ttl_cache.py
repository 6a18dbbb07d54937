"""Unit tests for TTLCache."""

import pytest

from forum_engine.infrastructure.cache.ttl_cache import TTLCache
from tests.helpers import FakeTimeAuthority


class TestTTLCache:
    """Tests for TTLCache."""

    def test_hit_within_ttl(self, fake_time_authority: FakeTimeAuthority) -> None:
        cache: TTLCache[str, int] = TTLCache(60, fake_time_authority)
        cache.set("a", 1)
        fake_time_authority.advance(seconds=59)

        assert cache.get("a") == 1

    def test_expires_at_ttl(self, fake_time_authority: FakeTimeAuthority) -> None:
        cache: TTLCache[str, int] = TTLCache(60, fake_time_authority)
        cache.set("a", 1)
        fake_time_authority.advance(seconds=60)

        assert cache.get("a") is None
        assert len(cache) == 0

    def test_zero_ttl_disables(self, fake_time_authority: FakeTimeAuthority) -> None:
        cache: TTLCache[str, int] = TTLCache(0, fake_time_authority)
        cache.set("a", 1)

        assert not cache.enabled
        assert cache.get("a") is None

    def test_invalidate_and_clear(self, fake_time_authority: FakeTimeAuthority) -> None:
        cache: TTLCache[str, int] = TTLCache(60, fake_time_authority)
        cache.set("a", 1)
        cache.set("b", 2)

        cache.invalidate("a")
        cache.invalidate("missing")
        assert cache.get("a") is None
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0

    def test_negative_ttl_rejected(self, fake_time_authority: FakeTimeAuthority) -> None:
        with pytest.raises(ValueError):
            TTLCache(-1, fake_time_authority)
