"""
Tests for the in-process TTL cache.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from services.cache_service import TTLCache


@pytest.mark.unit
class TestTTLCache:
    """Tests for TTLCache."""

    def test_set_and_get(self) -> None:
        cache = TTLCache()
        cache.set("a", [1, 2])
        assert cache.get("a") == [1, 2]
        assert len(cache) == 1

    def test_missing_key(self) -> None:
        assert TTLCache().get("nope") is None

    def test_expired_entry_is_removed(self) -> None:
        cache = TTLCache(default_ttl_seconds=60)
        cache.set("a", 1)

        later = datetime.now(timezone.utc) + timedelta(seconds=61)
        with patch("services.cache_service.datetime") as mock_datetime:
            mock_datetime.now.return_value = later
            assert cache.get("a") is None
        assert len(cache) == 0

    def test_zero_ttl_expires_immediately(self) -> None:
        cache = TTLCache()
        cache.set("a", 1, ttl_seconds=0)
        assert cache.get("a") is None

    def test_evicts_oldest_when_full(self) -> None:
        cache = TTLCache(max_entries=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_overwrite_does_not_evict(self) -> None:
        cache = TTLCache(max_entries=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)
        assert len(cache) == 2
        assert cache.get("a") == 10
        assert cache.get("b") == 2

    def test_delete_and_clear(self) -> None:
        cache = TTLCache()
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.clear()
        assert len(cache) == 0

    def test_stats(self) -> None:
        cache = TTLCache()
        cache.set("a", 1)
        cache.get("a")
        cache.get("a")
        cache.get("b")
        stats = cache.stats()
        assert stats["hits"] == 2
        assert stats["misses"] == 1
        assert stats["size"] == 1
        assert stats["hit_rate"] == pytest.approx(2 / 3)
