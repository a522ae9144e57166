from __future__ import annotations

from typing import Collection, Optional, Sequence

from ..catalog.model import ClassRef
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import User
from .repository import UserRepository

_SELECT_USER = """
    SELECT
        u.user_id, u.full_name, u.email, u.role,
        u.class_id, c.code AS class_code, c.description AS class_description
    FROM users u
    LEFT JOIN classes c ON c.class_id = u.class_id
"""


def _to_user(r: dict) -> User:
    class_ref = None
    if r.get("class_id") is not None:
        class_ref = ClassRef(
            class_id=str(r["class_id"]),
            code=r.get("class_code"),
            description=r.get("class_description"),
        )
    return User(
        user_id=str(r["user_id"]),
        full_name=r.get("full_name") or "",
        email=r.get("email"),
        role=Role(r["role"]),
        class_ref=class_ref,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_USER} WHERE u.user_id=%s", (user_id,))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_students(self, *, class_ids: Collection[str]) -> Sequence[User]:
        clause, params = in_clause("u.class_id", class_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT_USER} WHERE u.role=%s AND {clause} ORDER BY u.full_name",
                (Role.STUDENT.value, *params),
            )
            return [_to_user(r) for r in fetchall(cur)]
