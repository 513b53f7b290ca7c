"""SQLite-backed ``ISettingsRepo``: one JSON document in a singleton row.

Writes defer commit to the Unit of Work.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict

from ..interfaces.repos import ISettingsRepo, StoredSettings


class SettingsRepoSqlite(ISettingsRepo):
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def get_settings(self) -> StoredSettings:
        """Stored settings, or an empty document stamped at the epoch."""
        row = self.conn.execute("SELECT values_json, updated_at FROM settings WHERE id = 1").fetchone()
        if not row:
            return StoredSettings(values={}, updated_at=datetime.fromtimestamp(0, tz=timezone.utc))
        values = json.loads(row["values_json"]) if row["values_json"] else {}
        return StoredSettings(values=values, updated_at=datetime.fromisoformat(row["updated_at"]))

    def set_settings(self, values: Dict[str, Any]) -> StoredSettings:
        now = datetime.now(timezone.utc)
        self.conn.execute(
            "INSERT INTO settings(id, values_json, updated_at) VALUES(1, ?, ?) "
            "ON CONFLICT(id) DO UPDATE SET values_json=excluded.values_json, updated_at=excluded.updated_at",
            (json.dumps(values, ensure_ascii=False), now.isoformat()),
        )
        return StoredSettings(values=dict(values), updated_at=now)
