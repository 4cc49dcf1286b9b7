"""
Exception hierarchy for easy-config.

All exceptions inherit from EasyConfigError, which carries optional
structured context for logging and debugging.
"""

from __future__ import annotations

from typing import Any


class EasyConfigError(Exception):
    """Base exception for all easy-config errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(EasyConfigError):
    """Raised when settings are invalid or a storage descriptor is unknown."""

    pass


class InvalidItemError(EasyConfigError):
    """Raised when a key or value cannot be stored in the backend's format.

    Context should include:
        - key: The offending key
    """

    pass


class StorageError(EasyConfigError):
    """Base class for failures of a backing store."""

    pass


class StorageConnectionError(StorageError):
    """Raised when a database cannot be reached at initialization.

    Context should include:
        - backend: The storage kind (mysql, sqlite)
        - target: Host/port/database or file path being connected to
    """

    pass


class SchemaError(StorageError):
    """Raised when the config table or its unique index cannot be created.

    Context should include:
        - table: The table name
        - statement: Which DDL step failed
    """

    pass


class QueryError(StorageError):
    """Raised when a statement against the config table fails.

    Context should include:
        - module: The module namespace
        - key: The key being written
    """

    pass


class PropertiesFileError(StorageError):
    """Raised when the properties file cannot be opened, read or rewritten.

    Context should include:
        - path: The properties file path
    """

    pass
