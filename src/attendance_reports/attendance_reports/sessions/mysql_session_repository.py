from __future__ import annotations

from typing import Sequence

from ..catalog.model import ClassRef, SubjectRef
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import Session, SessionQuery
from .repository import SessionRepository


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find(self, query: SessionQuery) -> Sequence[Session]:
        clauses = ["s.subject_id IS NOT NULL"]
        params: list[object] = []

        if query.subject_ids is not None:
            clause, values = in_clause("s.subject_id", query.subject_ids)
            clauses.append(clause)
            params.extend(values)
        if query.class_id is not None:
            clauses.append("s.class_id=%s")
            params.append(query.class_id)
        if query.subject_id is not None:
            clauses.append("s.subject_id=%s")
            params.append(query.subject_id)
        if query.start_from is not None:
            clauses.append("s.start_time >= %s")
            params.append(query.start_from)
        if query.start_before is not None:
            clauses.append("s.start_time < %s")
            params.append(query.start_before)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.session_id, s.start_time, s.end_time,
                    s.class_id, c.code AS class_code, c.description AS class_description,
                    s.subject_id, sub.code AS subject_code, sub.description AS subject_description
                FROM sessions s
                LEFT JOIN classes c ON c.class_id = s.class_id
                LEFT JOIN subjects sub ON sub.subject_id = s.subject_id
                WHERE {where}
                ORDER BY s.start_time ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                Session(
                    session_id=str(r["session_id"]),
                    class_ref=(
                        ClassRef(
                            class_id=str(r["class_id"]),
                            code=r.get("class_code"),
                            description=r.get("class_description"),
                        )
                        if r.get("class_id") is not None
                        else None
                    ),
                    subject_ref=(
                        SubjectRef(
                            subject_id=str(r["subject_id"]),
                            code=r.get("subject_code"),
                            description=r.get("subject_description"),
                        )
                        if r.get("subject_id") is not None
                        else None
                    ),
                    start_time=r["start_time"],
                    end_time=r["end_time"],
                )
                for r in rows
            ]
