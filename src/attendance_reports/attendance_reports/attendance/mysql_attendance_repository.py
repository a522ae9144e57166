from __future__ import annotations

from typing import Collection, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_status(raw) -> int:
    code = int(raw)
    try:
        return AttendanceStatus(code)
    except ValueError:
        return code


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_sessions(
        self,
        session_ids: Collection[str],
        *,
        student_id: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        if not session_ids:
            return []

        clause, params = in_clause("session_id", session_ids)
        clauses = [clause]
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(student_id)
        if status is not None:
            clauses.append("status=%s")
            params.append(int(status.value))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, student_id, session_id, status, scan_time
                FROM attendances
                WHERE {where}
                ORDER BY scan_time ASC, attendance_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceRecord(
                    attendance_id=str(r["attendance_id"]),
                    student_id=str(r["student_id"]),
                    session_id=str(r["session_id"]),
                    status=_to_status(r["status"]),
                    scan_time=r["scan_time"],
                )
                for r in rows
            ]
