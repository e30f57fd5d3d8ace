"""SQLite storage backend."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from ..errors import PersistenceError
from .backends import StorageBackend
from .schema import ensure_schema

logger = logging.getLogger(__name__)


class SQLiteBackend(StorageBackend):
    """Stores each collection as one row of the catalog_collections table."""

    def __init__(
        self, db_path: str | Path = "~/.config/snapcatalog/catalog.db"
    ) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def read(self, key: str) -> str | None:
        try:
            row = (
                self._get_conn()
                .execute(
                    "SELECT payload FROM catalog_collections WHERE key = ?", (key,)
                )
                .fetchone()
            )
        except (sqlite3.Error, OSError) as e:
            raise PersistenceError(f"Failed to read {key!r}: {e}") from e
        return row["payload"] if row else None

    def write(self, key: str, payload: str) -> None:
        try:
            conn = self._get_conn()
            with conn:
                conn.execute(
                    """INSERT INTO catalog_collections (key, payload)
                       VALUES (?, ?)
                       ON CONFLICT(key) DO UPDATE SET
                           payload = excluded.payload,
                           updated_at = datetime('now', 'localtime')""",
                    (key, payload),
                )
        except (sqlite3.Error, OSError) as e:
            logger.error("Failed to write %r to %s: %s", key, self._db_path, e)
            raise PersistenceError(f"Failed to write {key!r}: {e}") from e
