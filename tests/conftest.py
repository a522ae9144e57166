from __future__ import annotations

from datetime import datetime, timedelta
from typing import Collection, Optional

import pytest

from attendance_reports.attendance.model import AttendanceRecord
from attendance_reports.catalog.model import ClassRef, LecturerAssignment, SubjectRef
from attendance_reports.container import wire_container
from attendance_reports.core.enums import AttendanceStatus, Role
from attendance_reports.sessions.model import Session, SessionQuery
from attendance_reports.users.model import User


class InMemoryStore:
    """Snapshot of the domain store plus small builders for test data."""

    def __init__(self):
        self.classes: dict[str, ClassRef] = {}
        self.subjects: dict[str, SubjectRef] = {}
        self.users: dict[str, User] = {}
        self.sessions: list[Session] = []
        self.records: list[AttendanceRecord] = []
        self.assignments: list[LecturerAssignment] = []
        self.calls: list[str] = []

    def add_class(self, class_id: str, code: Optional[str] = None, description: Optional[str] = None) -> ClassRef:
        ref = ClassRef(class_id=class_id, code=code if code is not None else class_id.upper(), description=description)
        self.classes[class_id] = ref
        return ref

    def add_subject(self, subject_id: str, code: Optional[str] = None, description: Optional[str] = None) -> SubjectRef:
        ref = SubjectRef(
            subject_id=subject_id,
            code=code if code is not None else subject_id.upper(),
            description=description,
        )
        self.subjects[subject_id] = ref
        return ref

    def add_user(
        self,
        user_id: str,
        role: Role,
        *,
        full_name: str = "",
        email: Optional[str] = None,
        class_id: Optional[str] = None,
    ) -> User:
        user = User(
            user_id=user_id,
            full_name=full_name,
            email=email,
            role=role,
            class_ref=self.classes[class_id] if class_id else None,
        )
        self.users[user_id] = user
        return user

    def add_student(self, user_id: str, full_name: str, *, email: Optional[str] = None, class_id: Optional[str] = None) -> User:
        return self.add_user(user_id, Role.STUDENT, full_name=full_name, email=email, class_id=class_id)

    def add_lecturer(self, user_id: str, *subject_ids: str) -> User:
        user = self.add_user(user_id, Role.LECTURER, full_name=f"Lecturer {user_id}")
        for subject_id in subject_ids:
            self.assignments.append(LecturerAssignment(lecturer_id=user_id, subject_id=subject_id))
        return user

    def add_session(
        self,
        session_id: str,
        *,
        class_id: Optional[str],
        subject_id: Optional[str],
        start: datetime,
        minutes: int = 90,
    ) -> Session:
        session = Session(
            session_id=session_id,
            class_ref=self.classes[class_id] if class_id else None,
            subject_ref=self.subjects[subject_id] if subject_id else None,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
        )
        self.sessions.append(session)
        return session

    def scan(
        self,
        student_id: str,
        session_id: str,
        *,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        at: Optional[datetime] = None,
    ) -> AttendanceRecord:
        if at is None:
            at = next(s.start_time for s in self.sessions if s.session_id == session_id) + timedelta(minutes=2)
        record = AttendanceRecord(
            attendance_id=f"a{len(self.records) + 1}",
            student_id=student_id,
            session_id=session_id,
            status=status,
            scan_time=at,
        )
        self.records.append(record)
        return record


class InMemoryCatalog:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_class(self, class_id: str) -> Optional[ClassRef]:
        self._store.calls.append("catalog.get_class")
        return self._store.classes.get(class_id)

    def list_classes(self, *, class_ids: Optional[Collection[str]] = None):
        self._store.calls.append("catalog.list_classes")
        items = [c for c in self._store.classes.values() if class_ids is None or c.class_id in class_ids]
        return sorted(items, key=lambda c: c.code or "")

    def list_subjects(self, *, subject_ids: Optional[Collection[str]] = None):
        self._store.calls.append("catalog.list_subjects")
        items = [s for s in self._store.subjects.values() if subject_ids is None or s.subject_id in subject_ids]
        return sorted(items, key=lambda s: s.code or "")

    def list_subject_ids(self):
        self._store.calls.append("catalog.list_subject_ids")
        return list(self._store.subjects)

    def list_assignments_for_lecturer(self, lecturer_id: str):
        self._store.calls.append("catalog.list_assignments_for_lecturer")
        return [a for a in self._store.assignments if a.lecturer_id == lecturer_id]

    def list_class_ids_for_subjects(self, subject_ids: Collection[str]):
        self._store.calls.append("catalog.list_class_ids_for_subjects")
        return list(
            dict.fromkeys(
                s.class_id for s in self._store.sessions if s.class_id and s.subject_id in set(subject_ids)
            )
        )


class InMemorySessions:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def find(self, query: SessionQuery):
        self._store.calls.append("sessions.find")
        return sorted((s for s in self._store.sessions if query.matches(s)), key=lambda s: s.start_time)


class InMemoryUsers:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, user_id: str) -> Optional[User]:
        self._store.calls.append("users.get_by_id")
        return self._store.users.get(user_id)

    def list_students(self, *, class_ids: Collection[str]):
        self._store.calls.append("users.list_students")
        wanted = set(class_ids)
        items = [u for u in self._store.users.values() if u.role == Role.STUDENT and u.class_id in wanted]
        return sorted(items, key=lambda u: u.full_name)


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def list_for_sessions(self, session_ids, *, student_id=None, status=None):
        self._store.calls.append("attendance.list_for_sessions")
        wanted = set(session_ids)
        return [
            r
            for r in self._store.records
            if r.session_id in wanted
            and (student_id is None or r.student_id == student_id)
            and (status is None or r.status == status)
        ]


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def container(store):
    return wire_container(
        catalog=InMemoryCatalog(store),
        sessions=InMemorySessions(store),
        users=InMemoryUsers(store),
        attendance=InMemoryAttendance(store),
    )


@pytest.fixture
def report_service(container):
    return container.report_service


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


class RecordingCursor:
    def __init__(self, rows):
        self._rows = list(rows)
        self.executed: list[tuple[str, tuple]] = []

    def execute(self, sql, params=()):
        self.executed.append((sql, params))

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeMySQLFactory:
    """Stands in for ``DatabaseConnection``; every connection shares one cursor."""

    def __init__(self, rows):
        self.cur = RecordingCursor(rows)

    def connect(self):
        return self

    # connection interface
    def cursor(self, dictionary=True):
        return self.cur

    def rollback(self):
        pass

    def close(self):
        pass


@pytest.fixture
def fake_mysql():
    return FakeMySQLFactory
