"""SQLite-backed ``IConversationRepo``.

Timestamps are stored as ISO8601 strings (naive values are taken as UTC).
Writes defer commit to the Unit of Work.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from ..interfaces.repos import Exchange, IConversationRepo

_COLUMNS = "id, session_id, prompt, response, model, created_at"


def _exchange_from_row(r: sqlite3.Row) -> Exchange:
    created = datetime.fromisoformat(r["created_at"])
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return Exchange(
        id=int(r["id"]),
        session_id=r["session_id"],
        prompt=r["prompt"],
        response=r["response"],
        model=r["model"],
        created_at=created,
    )


class ConversationRepoSqlite(IConversationRepo):
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def add(self, exchange: Exchange) -> int:
        created_at = exchange.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        cur = self.conn.execute(
            "INSERT INTO conversations(session_id, prompt, response, model, created_at) VALUES(?, ?, ?, ?, ?)",
            (exchange.session_id, exchange.prompt, exchange.response, exchange.model, created_at.isoformat()),
        )
        exchange.id = int(cur.lastrowid)
        return exchange.id

    def list_for_session(self, session_id: str, limit: Optional[int] = None) -> List[Exchange]:
        if limit is None:
            cur = self.conn.execute(
                f"SELECT {_COLUMNS} FROM conversations WHERE session_id = ? ORDER BY id ASC",
                (session_id,),
            )
            return [_exchange_from_row(r) for r in cur.fetchall()]
        cur = self.conn.execute(
            f"SELECT {_COLUMNS} FROM conversations WHERE session_id = ? ORDER BY id DESC LIMIT ?",
            (session_id, int(limit)),
        )
        return [_exchange_from_row(r) for r in reversed(cur.fetchall())]
