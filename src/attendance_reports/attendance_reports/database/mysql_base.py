from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Collection, Dict, List, Optional, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` on a fresh connection.

    Reports only read, so the transaction is always rolled back on exit; any
    driver error propagates to the caller unchanged.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
        finally:
            cur.close()
        conn.rollback()
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(column: str, values: Collection[object]) -> Tuple[str, List[object]]:
    """Build ``column IN (%s, ...)`` with its parameters.

    An empty collection yields a clause that matches nothing, so callers can
    pass an empty scope without special-casing it.
    """

    items = list(values)
    if not items:
        return "1=0", []
    placeholders = ",".join(["%s"] * len(items))
    return f"{column} IN ({placeholders})", items
