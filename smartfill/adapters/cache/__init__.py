"""Cache adapters - Implementations of the CachePort.

Available implementations:
- InMemoryCache: Thread-safe in-memory cache with lazy TTL expiry
- NullCache: No-op cache (always misses)
"""

from .memory_cache import CacheEntry, InMemoryCache
from .null_cache import NullCache

__all__ = ["CacheEntry", "InMemoryCache", "NullCache"]
