from __future__ import annotations

import logging
import os
import sqlite3
import time
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
STATE_PATH_ENV = "LAPWATCH_STATE_PATH"

LAPS_KEY = "stopwatch-lap-times"
DISPLAY_MODE_KEY = "stopwatch-dark-mode"


class KeyValueStore(Protocol):
    """String key/value storage. ``save`` may raise; ``load`` returns None when absent."""

    def save(self, key: str, value: str) -> None:
        ...

    def load(self, key: str) -> str | None:
        ...


class MemoryStore:
    """In-process store for tests and headless runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def save(self, key: str, value: str) -> None:
        self._data[str(key)] = str(value)

    def load(self, key: str) -> str | None:
        return self._data.get(str(key))

    def items(self) -> dict[str, str]:
        return dict(self._data)


def open_db(path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    _migrate(conn)
    return conn


def _utc_now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(time.time()))


def _migrate(conn: sqlite3.Connection) -> None:
    row = conn.execute("PRAGMA user_version;").fetchone()
    ver = int(row[0]) if row else 0
    if ver >= SCHEMA_VERSION:
        return

    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at_utc TEXT NOT NULL
            );
            """
        )
        conn.execute(f"PRAGMA user_version={SCHEMA_VERSION};")


class SqliteStore:
    """Key/value rows in a single SQLite file.

    Each call opens its own connection so a locked or deleted file only
    affects that call.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @classmethod
    def default_path(cls) -> Path:
        explicit = os.environ.get(STATE_PATH_ENV)
        if explicit:
            return Path(explicit).expanduser()
        return Path.home() / ".lapwatch.sqlite3"

    def save(self, key: str, value: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = open_db(self._path)
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at_utc) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at_utc = excluded.updated_at_utc
                    """,
                    (str(key), str(value), _utc_now_iso()),
                )
        finally:
            conn.close()

    def load(self, key: str) -> str | None:
        if not self._path.exists():
            return None
        conn = open_db(self._path)
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (str(key),)).fetchone()
        finally:
            conn.close()
        return None if row is None else str(row[0])


def save_best_effort(store: KeyValueStore, key: str, value: str) -> bool:
    """Write one value; failures are logged and reported as False, never raised."""

    try:
        store.save(key, value)
    except Exception:
        logger.warning("could not persist %s", key, exc_info=True)
        return False
    return True


def load_best_effort(store: KeyValueStore, key: str) -> str | None:
    """Read one value; an unreadable store is treated as empty."""

    try:
        return store.load(key)
    except Exception:
        logger.warning("could not read %s", key, exc_info=True)
        return None
