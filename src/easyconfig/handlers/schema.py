"""
SQL dialects, connections and table bootstrap for the relational backends.

Both MySQL (via PyMySQL) and SQLite speak DB-API 2.0; the differences this
package cares about are the parameter placeholder, how to detect the config
table, the auto-increment DDL and which exception types the driver raises.
"""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import pymysql

from easyconfig.exceptions import SchemaError, StorageConnectionError
from easyconfig.logging import get_logger
from easyconfig.types import StorageKind

logger = get_logger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

NAME_MAX_LENGTH = 255
VALUE_MAX_LENGTH = 4096
MODULE_MAX_LENGTH = 64


def is_valid_identifier(name: str) -> bool:
    """Check that a table name is safe to interpolate into SQL."""
    return bool(_IDENTIFIER_RE.match(name))


def index_name(table: str) -> str:
    """Name of the unique (module, name) index for a table."""
    return f"idx_{table.lower()}_i1"


@dataclass(frozen=True)
class Dialect:
    """Driver-specific SQL details."""

    kind: StorageKind
    placeholder: str
    table_exists_sql: str
    id_column_ddl: str
    errors: tuple[type[Exception], ...]
    ping: Callable[[Any], None]

    def create_table_sql(self, table: str) -> str:
        return f"""
            CREATE TABLE {table} (
                {self.id_column_ddl},
                name VARCHAR({NAME_MAX_LENGTH}) NOT NULL,
                value VARCHAR({VALUE_MAX_LENGTH}) NOT NULL,
                module VARCHAR({MODULE_MAX_LENGTH}) NOT NULL
            )
        """

    def create_index_sql(self, table: str) -> str:
        return f"CREATE UNIQUE INDEX {index_name(table)} ON {table} (module, name)"


def _mysql_ping(conn: pymysql.connections.Connection) -> None:
    conn.ping(reconnect=True)


def _sqlite_ping(conn: sqlite3.Connection) -> None:
    pass


MYSQL = Dialect(
    kind=StorageKind.MYSQL,
    placeholder="%s",
    table_exists_sql="SHOW TABLES LIKE %s",
    id_column_ddl="id INT AUTO_INCREMENT PRIMARY KEY",
    errors=(pymysql.err.Error,),
    ping=_mysql_ping,
)

SQLITE = Dialect(
    kind=StorageKind.SQLITE,
    placeholder="?",
    table_exists_sql="SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
    id_column_ddl="id INTEGER PRIMARY KEY AUTOINCREMENT",
    errors=(sqlite3.Error,),
    ping=_sqlite_ping,
)


def connect_mysql(
    host: str,
    port: int,
    user: str,
    password: str,
    database: str,
) -> pymysql.connections.Connection:
    """Open a MySQL connection and verify it answers.

    Raises:
        StorageConnectionError: If the server cannot be reached or refuses the login.
    """
    target = f"{user}@{host}:{port}/{database}"
    try:
        conn = pymysql.connect(
            host=host,
            port=port,
            user=user,
            password=password,
            database=database,
            charset="utf8mb4",
            autocommit=False,
        )
        conn.ping(reconnect=False)
    except pymysql.err.Error as e:
        logger.error("Failed to connect to database", target=target, error=str(e))
        raise StorageConnectionError(
            "Failed to connect to database",
            {"backend": StorageKind.MYSQL.value, "target": target},
        ) from e

    logger.info("Successfully connected to the database", target=target)
    return conn


def connect_sqlite(path: Path) -> sqlite3.Connection:
    """Open a SQLite database file, creating parent directories as needed.

    Raises:
        StorageConnectionError: If the file cannot be opened as a database.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path), timeout=30.0, check_same_thread=False)
        conn.execute("SELECT 1").fetchone()
    except (OSError, sqlite3.Error) as e:
        logger.error("Failed to open database", target=str(path), error=str(e))
        raise StorageConnectionError(
            "Failed to open database",
            {"backend": StorageKind.SQLITE.value, "target": str(path)},
        ) from e

    logger.info("Successfully connected to the database", target=str(path))
    return conn


def table_exists(conn: Any, dialect: Dialect, table: str) -> bool:
    """Check whether the config table exists.

    Raises:
        SchemaError: If the lookup itself fails.
    """
    cursor = conn.cursor()
    try:
        cursor.execute(dialect.table_exists_sql, (table,))
        row = cursor.fetchone()
    except dialect.errors as e:
        raise SchemaError(
            "Failed to look up table", {"table": table, "statement": "lookup"}
        ) from e
    finally:
        cursor.close()
    return row is not None and bool(row[0])


def ensure_table(conn: Any, dialect: Dialect, table: str) -> bool:
    """Create the config table and its unique index if the table is absent.

    Returns:
        True if the table was created.

    Raises:
        SchemaError: If the lookup or either DDL statement fails.
    """
    if table_exists(conn, dialect, table):
        return False

    for statement, sql in (
        ("create_table", dialect.create_table_sql(table)),
        ("create_index", dialect.create_index_sql(table)),
    ):
        cursor = conn.cursor()
        try:
            cursor.execute(sql)
        except dialect.errors as e:
            logger.error("Schema bootstrap failed", table=table, statement=statement, error=str(e))
            raise SchemaError(
                "Schema bootstrap failed", {"table": table, "statement": statement}
            ) from e
        finally:
            cursor.close()

    try:
        conn.commit()
    except dialect.errors as e:
        raise SchemaError("Schema bootstrap failed", {"table": table, "statement": "commit"}) from e

    logger.info("Created config table", table=table, index=index_name(table))
    return True
