"""Null cache implementation.

This cache always misses, so every Smart Fill request reaches a
provider. The container uses it when SEGMENT_AUTOFILL_CACHE_ENABLED is
false, and tests use it to exercise the provider path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class NullCache(Generic[T]):
    """No-op cache - always misses.

    This cache implements the CachePort protocol but never stores
    anything.
    """

    name: str = "null"

    def get(self, key: str) -> Optional[T]:
        """Always returns None (cache miss)."""
        return None

    def set(self, key: str, value: T) -> None:
        """Does nothing."""
        pass

    def clear(self) -> int:
        return 0

    def invalidate(self, key: str) -> bool:
        return False

    def size(self) -> int:
        return 0

    def stats(self) -> Dict[str, int]:
        """Return empty stats."""
        return {
            "size": 0,
            "hits": 0,
            "misses": 0,
            "hit_rate_percent": 0,
        }
