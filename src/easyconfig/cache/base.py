"""
Base classes for caching.

CacheProtocol is the interface handlers use for their read-through cache.
Entries never expire on their own; callers invalidate explicitly on write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CacheProtocol(ABC):
    """Abstract interface for cache implementations."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Get a value from the cache, or None on a miss."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set a value in the cache."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a value from the cache. Returns True if it was present."""
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if a key exists in the cache."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""
        ...
