"""Key-value storage backends for bot state.

Values are JSON-compatible dicts keyed by (scope, scope_id, name), where scope
is "conversation" or "user" and name is the state property name.
"""

import copy
import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable

StorageKey = tuple[str, str, str]


@runtime_checkable
class Storage(Protocol):
    """Backend interface used by state property accessors."""

    def read(self, key: StorageKey) -> dict[str, Any] | None:
        ...

    def write(self, key: StorageKey, value: dict[str, Any]) -> None:
        ...

    def delete(self, key: StorageKey) -> bool:
        ...

    def clear(self, scope: str | None = None) -> int:
        ...


class MemoryStorage:
    """Process-local storage. Values are copied on read and write."""

    def __init__(self) -> None:
        self._items: dict[StorageKey, dict[str, Any]] = {}

    def read(self, key: StorageKey) -> dict[str, Any] | None:
        value = self._items.get(key)
        return copy.deepcopy(value) if value is not None else None

    def write(self, key: StorageKey, value: dict[str, Any]) -> None:
        self._items[key] = copy.deepcopy(value)

    def delete(self, key: StorageKey) -> bool:
        return self._items.pop(key, None) is not None

    def clear(self, scope: str | None = None) -> int:
        keys = [k for k in self._items if scope is None or k[0] == scope]
        for key in keys:
            del self._items[key]
        return len(keys)

    def __len__(self) -> int:
        return len(self._items)


class SqliteStorage:
    """Durable storage in a single sqlite table.

    One connection per operation; writes commit on success and roll back on
    error.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self) -> None:
        with self._conn() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS state (
                    scope TEXT NOT NULL,
                    scope_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    payload_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (scope, scope_id, name)
                );
            """)

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with automatic commit/rollback."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def read(self, key: StorageKey) -> dict[str, Any] | None:
        with self._conn() as conn:
            row = conn.execute(
                """
                SELECT payload_json FROM state
                WHERE scope = ? AND scope_id = ? AND name = ?
                """,
                key,
            ).fetchone()
        if row is None:
            return None
        return json.loads(row["payload_json"])

    def write(self, key: StorageKey, value: dict[str, Any]) -> None:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO state (scope, scope_id, name, payload_json, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (scope, scope_id, name) DO UPDATE SET
                    payload_json = excluded.payload_json,
                    updated_at = excluded.updated_at
                """,
                (
                    *key,
                    json.dumps(value),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )

    def delete(self, key: StorageKey) -> bool:
        with self._conn() as conn:
            cursor = conn.execute(
                "DELETE FROM state WHERE scope = ? AND scope_id = ? AND name = ?",
                key,
            )
            return cursor.rowcount > 0

    def clear(self, scope: str | None = None) -> int:
        with self._conn() as conn:
            if scope is None:
                cursor = conn.execute("DELETE FROM state")
            else:
                cursor = conn.execute("DELETE FROM state WHERE scope = ?", (scope,))
            return cursor.rowcount
