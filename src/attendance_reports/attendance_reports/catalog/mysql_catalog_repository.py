from __future__ import annotations

from typing import Collection, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import ClassRef, LecturerAssignment, SubjectRef
from .repository import CatalogRepository


def _to_class(r: dict) -> ClassRef:
    return ClassRef(class_id=str(r["class_id"]), code=r.get("code"), description=r.get("description"))


def _to_subject(r: dict) -> SubjectRef:
    return SubjectRef(subject_id=str(r["subject_id"]), code=r.get("code"), description=r.get("description"))


class MySQLCatalogRepository(CatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_class(self, class_id: str) -> Optional[ClassRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, code, description FROM classes WHERE class_id=%s",
                (class_id,),
            )
            r = fetchone(cur)
            return _to_class(r) if r else None

    def list_classes(self, *, class_ids: Optional[Collection[str]] = None) -> Sequence[ClassRef]:
        where, params = ("1=1", [])
        if class_ids is not None:
            where, params = in_clause("class_id", class_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT class_id, code, description FROM classes WHERE {where} ORDER BY code",
                tuple(params),
            )
            return [_to_class(r) for r in fetchall(cur)]

    def list_subjects(self, *, subject_ids: Optional[Collection[str]] = None) -> Sequence[SubjectRef]:
        where, params = ("1=1", [])
        if subject_ids is not None:
            where, params = in_clause("subject_id", subject_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT subject_id, code, description FROM subjects WHERE {where} ORDER BY code",
                tuple(params),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def list_subject_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subject_id FROM subjects")
            return [str(r["subject_id"]) for r in fetchall(cur)]

    def list_assignments_for_lecturer(self, lecturer_id: str) -> Sequence[LecturerAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT lecturer_id, subject_id FROM lecturer_subjects WHERE lecturer_id=%s",
                (lecturer_id,),
            )
            return [
                LecturerAssignment(lecturer_id=str(r["lecturer_id"]), subject_id=str(r["subject_id"]))
                for r in fetchall(cur)
            ]

    def list_class_ids_for_subjects(self, subject_ids: Collection[str]) -> Sequence[str]:
        where, params = in_clause("subject_id", subject_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT DISTINCT class_id FROM sessions WHERE class_id IS NOT NULL AND {where}",
                tuple(params),
            )
            return [str(r["class_id"]) for r in fetchall(cur)]
