"""
Handler contract shared by every backend.

A Handler is bound to one module namespace and one backing store. It is
created once (see easyconfig.storage.initialize) and used for all reads and
writes of that module.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from easyconfig.types import Item


class Handler(ABC):
    """Abstract key/value interface for one module."""

    module: str

    @abstractmethod
    def get(self, key: str) -> str:
        """Get the value for key, or an empty string if it is not set."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Create or overwrite key.

        Raises:
            InvalidItemError: If the key or value cannot be stored.
            StorageError: If the backing store could not be written.
        """
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Failures are logged, not raised."""
        ...

    @abstractmethod
    def list(self) -> list[Item]:
        """List every item of this handler's module."""
        ...

    def close(self) -> None:
        """Release resources held by the handler."""

    def __enter__(self) -> Handler:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
