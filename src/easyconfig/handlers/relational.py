"""
Relational handler.

Rows live in a single config table with a unique index on (module, name).
Reads go through a per-handler InMemoryKVCache keyed by the bare key name;
writes invalidate the affected entry. The cache is never expired otherwise,
so values changed in the table by another process stay stale until this
handler writes the same key.
"""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Generator

from easyconfig.cache import InMemoryKVCache
from easyconfig.exceptions import QueryError
from easyconfig.handlers.base import Handler
from easyconfig.handlers.schema import Dialect
from easyconfig.logging import get_logger, log_context
from easyconfig.types import Item

logger = get_logger(__name__)


class RelationalHandler(Handler):
    """Handler backed by a DB-API connection (MySQL or SQLite).

    Use of the connection is serialized with a lock. Two threads missing the
    cache for the same key may both query the table; the results are equal.
    """

    def __init__(
        self,
        conn: Any,
        dialect: Dialect,
        table: str,
        module: str,
        cache: InMemoryKVCache | None = None,
    ) -> None:
        self.module = module
        self.table = table
        self.dialect = dialect
        self.cache = cache if cache is not None else InMemoryKVCache()
        self._conn = conn
        self._lock = threading.RLock()
        self._closed = False

        p = dialect.placeholder
        self._select_sql = f"SELECT value FROM {table} WHERE module = {p} AND name = {p}"
        self._exists_sql = (
            f"SELECT EXISTS(SELECT 1 FROM {table} WHERE module = {p} AND name = {p})"
        )
        self._update_sql = f"UPDATE {table} SET value = {p} WHERE module = {p} AND name = {p}"
        self._insert_sql = f"INSERT INTO {table} (module, name, value) VALUES ({p}, {p}, {p})"
        self._delete_sql = f"DELETE FROM {table} WHERE module = {p} AND name = {p}"
        self._list_sql = (
            f"SELECT module, name, value FROM {table} WHERE module = {p} ORDER BY name"
        )

    @contextmanager
    def _cursor(self) -> Generator[Any, None, None]:
        """Yield a cursor while holding the connection lock.

        A closed handler never reaches the driver, so MySQL cannot reconnect it.
        """
        with self._lock:
            if self._closed:
                raise self.dialect.errors[0]("Handler is closed")
            self.dialect.ping(self._conn)
            cursor = self._conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()

    def _rollback(self) -> None:
        if self._closed:
            return
        try:
            self._conn.rollback()
        except self.dialect.errors as e:
            logger.warning("Rollback failed", error=str(e))

    def _end_read(self) -> None:
        # End the read transaction so the next miss sees committed rows.
        self._conn.rollback()

    def _context(self) -> AbstractContextManager[None]:
        return log_context(backend=self.dialect.kind.value, module=self.module)

    def get(self, key: str) -> str:
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        with self._context():
            try:
                with self._cursor() as cursor:
                    cursor.execute(self._select_sql, (self.module, key))
                    row = cursor.fetchone()
                    self._end_read()
            except self.dialect.errors as e:
                logger.error("Failed to query item", key=key, error=str(e))
                return ""

        if row is None:
            return ""

        value = row[0]
        self.cache.set(key, value)
        return value

    def set(self, key: str, value: str) -> None:
        with self._context():
            try:
                with self._cursor() as cursor:
                    cursor.execute(self._exists_sql, (self.module, key))
                    exists = bool(cursor.fetchone()[0])
                    if exists:
                        cursor.execute(self._update_sql, (value, self.module, key))
                    else:
                        cursor.execute(self._insert_sql, (self.module, key, value))
                    self._conn.commit()
            except self.dialect.errors as e:
                logger.error("Failed to set item", key=key, error=str(e))
                self._rollback()
                raise QueryError(
                    "Failed to set item", {"module": self.module, "key": key}
                ) from e
            finally:
                self.cache.delete(key)

            logger.debug("Updated item" if exists else "Inserted item", key=key)

    def remove(self, key: str) -> None:
        with self._context():
            try:
                with self._cursor() as cursor:
                    cursor.execute(self._delete_sql, (self.module, key))
                    deleted = cursor.rowcount
                    self._conn.commit()
            except self.dialect.errors as e:
                logger.error("Failed to remove item", key=key, error=str(e))
                self._rollback()
                return
            finally:
                self.cache.delete(key)

            logger.debug("Removed item", key=key, rows=deleted)

    def list(self) -> list[Item]:
        with self._context():
            try:
                with self._cursor() as cursor:
                    cursor.execute(self._list_sql, (self.module,))
                    rows = cursor.fetchall()
                    self._end_read()
            except self.dialect.errors as e:
                logger.error("Failed to list items", error=str(e))
                return []

        return [Item(module=row[0], key=row[1], value=row[2]) for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._closed:
                return
            self._conn.close()
            self._closed = True
            self.cache.clear()
