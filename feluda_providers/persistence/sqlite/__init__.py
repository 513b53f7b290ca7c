from __future__ import annotations

from typing import Optional

from .engine import create_connection, get_db_path, init_schema
from .unit_of_work import UnitOfWorkSqlite


def get_uow(db_path: Optional[str] = None) -> UnitOfWorkSqlite:
    """Open a connection, ensure the schema, and wrap it in a Unit of Work."""
    conn = create_connection(db_path)
    init_schema(conn)
    return UnitOfWorkSqlite(conn)


__all__ = [
    "create_connection",
    "get_db_path",
    "init_schema",
    "UnitOfWorkSqlite",
    "get_uow",
]
