# src/todo_companion/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..core.errors import StorageError
from .task_models import Task

logger = logging.getLogger(__name__)


class SqliteTaskStore:
    """
    SQLite key-value blob store for the task collection.

    The whole collection is one JSON array stored under `key` in a single
    `kv` table; the store never interprets the records beyond "is a list".

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "todos.sqlite3", *, key: str = "todos") -> None:
        self._db_path = Path(db_path)
        self._key = key
        try:
            self._ensure_schema()
        except StorageError:
            # load()/save() will raise StorageError too; the controller degrades to memory-only.
            logger.exception("SqliteTaskStore schema init failed db=%s", self._db_path)
            return
        logger.info("SqliteTaskStore ready db=%s key=%s", self._db_path, self._key)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._get_conn()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open task database {self._db_path}") from e
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot initialize task database {self._db_path}") from e
        finally:
            conn.close()

    # ---- public API ----

    def load(self) -> list[dict[str, Any]]:
        """Return the stored records (empty list if nothing was saved yet)."""
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read tasks from {self._db_path}") from e

        if row is None:
            return []

        try:
            data = json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored tasks under key={self._key!r} are not valid JSON") from e
        if not isinstance(data, list):
            raise StorageError(f"Stored tasks under key={self._key!r} are not a list")
        return data

    def save(self, tasks: Iterable[Task]) -> None:
        records = [t.to_record() for t in tasks]
        blob = json.dumps(records, ensure_ascii=False)
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                   updated_at = excluded.updated_at
                    """,
                    (self._key, blob, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write tasks to {self._db_path}") from e
        logger.debug("Saved %d tasks key=%s", len(records), self._key)
