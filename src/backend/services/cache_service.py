"""
In-process TTL cache.

Holds short-lived results (leaderboards) for a single worker. Entries expire
after their TTL and the oldest-inserted entry is evicted when the cache is
full. There is no cross-process coordination.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import structlog

from core.config import settings

logger = structlog.get_logger(__name__)


class TTLCache:
    """Key/value cache with per-entry expiry and a size bound."""

    def __init__(self, default_ttl_seconds: int = 300, max_entries: int = 1000):
        self.default_ttl_seconds = default_ttl_seconds
        self.max_entries = max_entries
        self._entries: dict[str, tuple[Any, datetime]] = {}  # key -> (value, expires_at)
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Get a value, or None when missing or expired."""
        if key in self._entries:
            value, expires_at = self._entries[key]
            if datetime.now(timezone.utc) < expires_at:
                self._hits += 1
                return value
            del self._entries[key]
        self._misses += 1
        return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store a value with a TTL (the default TTL when omitted)."""
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        if key in self._entries:
            # Re-insert so the key counts as newest
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            self._evict()
        self._entries[key] = (value, datetime.now(timezone.utc) + timedelta(seconds=ttl))

    def delete(self, key: str) -> bool:
        """Remove a key; returns whether it was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, Any]:
        """Hit/miss counters and current size."""
        lookups = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "size": len(self._entries),
            "hit_rate": self._hits / lookups if lookups else 0.0,
        }

    def _evict(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        if len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("cache_entry_evicted", key=oldest)


# Global instance
leaderboard_cache = TTLCache(
    default_ttl_seconds=settings.LEADERBOARD_CACHE_TTL_SECONDS,
    max_entries=settings.CACHE_MAX_ENTRIES,
)


def get_leaderboard_cache() -> TTLCache:
    """Dependency for getting the leaderboard cache."""
    return leaderboard_cache
