"""
Key-value cache implementation.

InMemoryKVCache: dict-backed cache guarded by a lock.
  - load/store/delete are individually atomic
  - no TTL; entries live until deleted or cleared
  - hit/miss counters for monitoring
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from easyconfig.cache.base import CacheProtocol


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache counters."""

    hits: int
    misses: int
    size: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class InMemoryKVCache(CacheProtocol):
    """Thread-safe in-memory key-value cache."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> str | None:
        with self._lock:
            value = self._data.get(key)
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def stats(self) -> CacheStats:
        """Return current hit/miss counters and size."""
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses, size=len(self._data))

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
