from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Viewer role used to scope what a report may show."""

    ADMIN = "admin"
    LECTURER = "lecturer"
    STUDENT = "student"


class AttendanceStatus(int, Enum):
    """Status stored on an attendance scan. Only PRESENT counts in reports."""

    ABSENT = 0
    PRESENT = 1
    LATE = 2


class SortKey(str, Enum):
    STUDENT_NAME = "StudentName"
    SUBJECT_NAME = "SubjectName"
    PERCENTAGE = "Percentage"


class SessionOutcome(str, Enum):
    """Per-session status shown in drill-down lists."""

    PRESENT = "Present"
    ABSENT = "Absent"
