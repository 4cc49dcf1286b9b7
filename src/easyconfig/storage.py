"""
Storage descriptors and the initialize() entry point.

A Storage says where configuration lives: a properties file, a MySQL
database or a SQLite database file. initialize() turns a descriptor into a
Handler bound to one module namespace.

Usage:
    storage = PropertiesStorage("/etc/myapp/app.properties")
    handler = initialize(storage, "app")
    handler.set("port", "8080")
    handler.get("port")  # "8080"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Union

from easyconfig.exceptions import ConfigurationError, SchemaError
from easyconfig.handlers.base import Handler
from easyconfig.handlers.properties import PropertiesHandler
from easyconfig.handlers.relational import RelationalHandler
from easyconfig.handlers.schema import (
    MYSQL,
    SQLITE,
    Dialect,
    connect_mysql,
    connect_sqlite,
    ensure_table,
    is_valid_identifier,
)
from easyconfig.logging import get_logger, log_context
from easyconfig.types import DEFAULT_TABLE, StorageKind, normalize_module

logger = get_logger(__name__)


def _check_table(table: str) -> None:
    if not is_valid_identifier(table):
        raise ConfigurationError("Invalid table name", {"table": table})


@dataclass(frozen=True)
class PropertiesStorage:
    """A flat key=value file."""

    path: Path

    kind = StorageKind.PROPERTIES

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))


@dataclass(frozen=True)
class MySQLStorage:
    """Connection parameters for a MySQL database."""

    host: str
    user: str
    password: str = field(repr=False)
    database: str
    port: int = 3306
    table: str = DEFAULT_TABLE

    kind = StorageKind.MYSQL

    def __post_init__(self) -> None:
        _check_table(self.table)


@dataclass(frozen=True)
class SQLiteStorage:
    """A SQLite database file holding the config table."""

    path: Path
    table: str = DEFAULT_TABLE

    kind = StorageKind.SQLITE

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))
        _check_table(self.table)


Storage = Union[PropertiesStorage, MySQLStorage, SQLiteStorage]


def _init_properties(storage: PropertiesStorage, module: str) -> Handler:
    handler = PropertiesHandler(storage.path, module)
    logger.debug("Loaded properties file", path=str(storage.path), items=len(handler.list()))
    return handler


def _bootstrap(conn: Any, dialect: Dialect, table: str, module: str) -> RelationalHandler:
    try:
        ensure_table(conn, dialect, table)
    except SchemaError:
        conn.close()
        raise
    return RelationalHandler(conn, dialect, table, module)


def _init_mysql(storage: MySQLStorage, module: str) -> Handler:
    conn = connect_mysql(
        host=storage.host,
        port=storage.port,
        user=storage.user,
        password=storage.password,
        database=storage.database,
    )
    return _bootstrap(conn, MYSQL, storage.table, module)


def _init_sqlite(storage: SQLiteStorage, module: str) -> Handler:
    conn = connect_sqlite(storage.path)
    return _bootstrap(conn, SQLITE, storage.table, module)


_FACTORIES: dict[type, Callable[..., Handler]] = {
    PropertiesStorage: _init_properties,
    MySQLStorage: _init_mysql,
    SQLiteStorage: _init_sqlite,
}


def initialize(storage: Storage, module: str = "") -> Handler:
    """Create a Handler for module on the given storage.

    A blank module name selects the DEFAULT module.

    Raises:
        ConfigurationError: If storage is not a known descriptor.
        StorageConnectionError: If a database cannot be reached.
        SchemaError: If the config table cannot be created.
    """
    factory = _FACTORIES.get(type(storage))
    if factory is None:
        raise ConfigurationError(
            "Unknown storage descriptor", {"type": type(storage).__name__}
        )

    module = normalize_module(module)
    with log_context(backend=storage.kind.value, module=module):
        return factory(storage, module)
