"""
easy-config: module-scoped key/value configuration backed by a properties
file or a relational table.
"""

from easyconfig.handlers.base import Handler
from easyconfig.storage import (
    MySQLStorage,
    PropertiesStorage,
    SQLiteStorage,
    Storage,
    initialize,
)
from easyconfig.types import DEFAULT_MODULE, DEFAULT_TABLE, Item, StorageKind

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_MODULE",
    "DEFAULT_TABLE",
    "Handler",
    "Item",
    "MySQLStorage",
    "PropertiesStorage",
    "SQLiteStorage",
    "Storage",
    "StorageKind",
    "initialize",
]
