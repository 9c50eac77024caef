"""Thread-safe in-memory suggestion cache with lazy TTL expiry.

Entries expire a fixed number of seconds after they are written. Expired
entries are only removed when a lookup observes them; there is no
background sweep and no size bound, so the cache lives and grows for the
lifetime of the process.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

from ...config import DEFAULT_CACHE_TTL_SECONDS
from ...ports.cache import Clock

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached value and the instant after which it is stale."""

    expires_at: float
    value: T


@dataclass
class InMemoryCache(Generic[T]):
    """Thread-safe in-memory cache with a fixed TTL.

    This cache implements the CachePort protocol. The clock is injected
    so tests can move time forward without sleeping.

    Attributes:
        ttl_seconds: Time-to-live applied to every entry
        clock: Returns the current time in seconds
        name: Cache name for logging

    Example:
        cache = InMemoryCache[AutofillSuggestion](ttl_seconds=900, name="autofill")
        cache.set("flight|ua120|2025-03-01|", suggestion)
    """

    ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    clock: Clock = field(default=time.time, repr=False)
    name: str = "cache"

    _store: Dict[str, CacheEntry[T]] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    # Statistics
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def get(self, key: str) -> Optional[T]:
        """Get a value from the cache.

        An entry whose expiry has passed is deleted and reported as a miss.

        Args:
            key: The cache key.

        Returns:
            The cached value, or None if not found or expired.
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self.clock() > entry.expires_at:
                del self._store[key]
                self._logger.debug("Cache entry expired", extra={"key": key})
                self._misses += 1
                return None

            self._hits += 1
            return entry.value

    def set(self, key: str, value: T) -> None:
        """Set a value in the cache, replacing any previous entry.

        Args:
            key: The cache key.
            value: The value to cache.
        """
        with self._lock:
            self._store[key] = CacheEntry(
                expires_at=self.clock() + self.ttl_seconds,
                value=value,
            )
            self._logger.debug(
                "Cache entry set",
                extra={"key": key, "ttl": self.ttl_seconds},
            )

    def clear(self) -> int:
        """Clear all entries from the cache.

        Returns:
            Number of entries that were cleared.
        """
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._logger.info("Cache cleared", extra={"entries_cleared": count})
            return count

    def invalidate(self, key: str) -> bool:
        """Invalidate a specific cache entry.

        Args:
            key: The cache key to invalidate.

        Returns:
            True if the key existed and was removed.
        """
        with self._lock:
            if key in self._store:
                del self._store[key]
                self._logger.debug("Cache entry invalidated", extra={"key": key})
                return True
            return False

    def size(self) -> int:
        """Return the number of entries, including ones not yet evicted."""
        with self._lock:
            return len(self._store)

    def stats(self) -> Dict[str, Any]:
        """Return cache statistics.

        Returns:
            Dictionary with hit/miss counts and size.
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(hit_rate, 1),
            }
