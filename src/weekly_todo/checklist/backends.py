# src/weekly_todo/checklist/backends.py

from __future__ import annotations

import contextlib
import logging
import os
import sqlite3
import time
from pathlib import Path

from ..core.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class SqliteBackend:
    """
    SQLite key-value slot.

    One table (kv: key -> value). The checklist lives under a single fixed
    key, so every save replaces the whole document in one statement.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "weekly_todo.sqlite3", *, key: str = "weekly-todo-app") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._key = key
        self._ensure_schema()
        logger.info("SqliteBackend ready db=%s key=%s", self._db_path, self._key)

    @property
    def key(self) -> str:
        return self._key

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
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
        finally:
            conn.close()

    # ---- StorageBackend ----

    def load(self) -> str | None:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"cannot open {self._db_path}: {e}") from e
        try:
            cur = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,))
            row = cur.fetchone()
            return None if row is None else str(row[0])
        except sqlite3.Error as e:
            raise PersistenceFailure(f"cannot read key {self._key!r}: {e}") from e
        finally:
            conn.close()

    def save(self, payload: str) -> bool:
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("SqliteBackend: cannot open %s", self._db_path)
            return False
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (self._key, payload, time.time()),
            )
            conn.commit()
            return True
        except sqlite3.Error:
            logger.exception("SqliteBackend: failed to write key %s", self._key)
            return False
        finally:
            conn.close()


class JsonFileBackend:
    """
    Plain JSON file holding the document.

    Writes go to a temp file first and are swapped in with os.replace, so a
    failed write never leaves a half-written document behind.
    """

    def __init__(self, path: str | Path = "weekly_todo.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            return self._path.read_text("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceFailure(f"cannot read {self._path}: {e}") from e

    def save(self, payload: str) -> bool:
        tmp = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
            return True
        except OSError:
            logger.exception("JsonFileBackend: failed to write %s", self._path)
            with contextlib.suppress(OSError):
                tmp.unlink()
            return False
