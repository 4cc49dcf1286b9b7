"""
Cache package for handler read-through caching.

- Base interface (base.py): CacheProtocol
- Key-value cache (kv_cache.py): thread-safe in-memory cache with stats
"""

from easyconfig.cache.base import CacheProtocol
from easyconfig.cache.kv_cache import CacheStats, InMemoryKVCache

__all__ = ["CacheProtocol", "CacheStats", "InMemoryKVCache"]
