"""SQLite Unit of Work aggregating the repositories.

Commits on clean context exit, rolls back otherwise, and closes the
connection when it owns it. Repositories never commit on their own.
"""

from __future__ import annotations

import sqlite3

from ..interfaces.repos import IUnitOfWork
from .conversations_repo import ConversationRepoSqlite
from .settings_repo import SettingsRepoSqlite


class UnitOfWorkSqlite(IUnitOfWork):
    def __init__(self, conn: sqlite3.Connection, *, owns_connection: bool = True) -> None:
        self._conn = conn
        self._owns_connection = owns_connection
        self.conversations = ConversationRepoSqlite(conn)
        self.settings = SettingsRepoSqlite(conn)

    def __enter__(self) -> "UnitOfWorkSqlite":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._owns_connection:
                self._conn.close()

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()
