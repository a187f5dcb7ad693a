"""Key-value blob stores backing persisted dashboard state."""

import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from weatherboard.errors import StorageUnavailable
from weatherboard.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store; used for tests and as the degraded fallback."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqliteKeyValueStore:
    """Store backed by the kv_state table of a migrated SQLite database."""

    def __init__(self, db_path: str | Path):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                conn = connect(self.db_path)
                run_migrations(conn)
            except (sqlite3.Error, OSError) as e:
                raise StorageUnavailable(
                    f"Cannot open state database {self.db_path}: {e}"
                ) from e
            self._conn = conn
        return self._conn

    def get(self, key: str) -> str | None:
        conn = self._connection()
        try:
            row = conn.execute(
                "SELECT value FROM kv_state WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot read {key!r}: {e}") from e
        if row is None:
            return None
        return row[0]

    def set(self, key: str, value: str) -> None:
        conn = self._connection()
        try:
            conn.execute(
                "INSERT INTO kv_state (key, value, updated_at) "
                "VALUES (?, ?, CURRENT_TIMESTAMP) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = CURRENT_TIMESTAMP",
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot write {key!r}: {e}") from e

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
