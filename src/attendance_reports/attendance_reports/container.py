from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .catalog.mysql_catalog_repository import MySQLCatalogRepository
from .catalog.repository import CatalogRepository
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .sessions.filter import SessionFilter
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    catalog_repo: CatalogRepository
    sessions_repo: SessionRepository
    users_repo: UserRepository
    attendance_repo: AttendanceRepository

    session_filter: SessionFilter
    report_service: ReportService

    conn: Optional[DatabaseConnection] = None


def wire_container(
    *,
    catalog: CatalogRepository,
    sessions: SessionRepository,
    users: UserRepository,
    attendance: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    session_filter = SessionFilter(sessions)
    report_service = ReportService(catalog, users, attendance, session_filter)

    return Container(
        catalog_repo=catalog,
        sessions_repo=sessions,
        users_repo=users,
        attendance_repo=attendance,
        session_filter=session_filter,
        report_service=report_service,
        conn=conn,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        catalog=MySQLCatalogRepository(conn),
        sessions=MySQLSessionRepository(conn),
        users=MySQLUserRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        conn=conn,
    )
