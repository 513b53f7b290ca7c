"""SQLite engine helpers.

- Connections apply WAL journaling, NORMAL synchronous mode and a busy
  timeout from ``config.defaults``.
- The database path comes from the caller, ``FELUDA_DB_PATH``, or
  ``~/.feluda/feluda.db``.
- Connections may be used from the worker thread FastAPI runs the request
  on, not only the thread that opened them.
"""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path
from typing import Optional

from ...config.defaults import (
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)

DEFAULT_DB_PATH = Path("~/.feluda/feluda.db")


def get_db_path(db_path: Optional[str] = None) -> Path:
    """Resolve the database file path (not created yet)."""
    raw = db_path or os.getenv("FELUDA_DB_PATH")
    return Path(raw).expanduser() if raw else DEFAULT_DB_PATH.expanduser()


def create_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a connection with ``row_factory=sqlite3.Row`` and the standard PRAGMAs."""
    path = get_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
    conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create tables if missing, then commit.

    - ``conversations``: stored prompt/response exchanges per session
    - ``settings``: singleton client settings row (JSON document)
    """
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS conversations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            session_id TEXT NOT NULL,
            prompt TEXT NOT NULL,
            response TEXT NOT NULL,
            model TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        """
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_conversations_session ON conversations(session_id, id);"
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS settings (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            values_json TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """
    )
    conn.commit()

