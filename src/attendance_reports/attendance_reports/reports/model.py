from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..catalog.model import ClassRef, SubjectRef
from ..core.constants import PERCENT_DECIMALS
from ..core.enums import Role, SessionOutcome


def attendance_percentage(present: int, total: int) -> float:
    """Percentage of ``total`` sessions attended; 0 when there is nothing to attend."""

    if total <= 0:
        return 0.0
    return round(present * 100.0 / total, PERCENT_DECIMALS)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class ViewerContext:
    """Who is asking. Resolved by the authentication layer, never looked up implicitly."""

    user_id: str
    role: Role


@dataclass(frozen=True)
class ReportFilter:
    class_id: Optional[str] = None
    subject_id: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def as_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "subject_id": self.subject_id,
            "from": self.date_from.isoformat() if self.date_from else None,
            "to": self.date_to.isoformat() if self.date_to else None,
        }


@dataclass(frozen=True)
class ReportRequest:
    """Per-request state threaded through the presenters."""

    viewer: ViewerContext
    filter: ReportFilter = field(default_factory=ReportFilter)
    search: str = ""
    sort: Optional[str] = None
    direction: Optional[str] = None
    partial: bool = False


@dataclass(frozen=True)
class StudentAttendanceRow:
    """One student in the cross-student report."""

    student_id: str
    student_name: str
    student_email: Optional[str]
    class_code: Optional[str]
    class_name: Optional[str]
    subject_code: Optional[str]
    subject_name: Optional[str]
    total_sessions: int
    present_count: int
    # Most recent present scan inside the filtered sessions, if any.
    recent_subject_code: Optional[str] = None
    recent_start_time: Optional[datetime] = None
    recent_end_time: Optional[datetime] = None

    @property
    def percentage(self) -> float:
        return attendance_percentage(self.present_count, self.total_sessions)

    def as_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "student_email": self.student_email,
            "class_code": self.class_code,
            "class_name": self.class_name,
            "subject_code": self.subject_code,
            "subject_name": self.subject_name,
            "total_sessions": self.total_sessions,
            "present_count": self.present_count,
            "percentage": self.percentage,
            "recent_subject_code": self.recent_subject_code,
            "recent_start_time": _iso(self.recent_start_time),
            "recent_end_time": _iso(self.recent_end_time),
        }


@dataclass(frozen=True)
class SubjectSummaryRow:
    """One subject in a student's own summary."""

    subject_id: str
    subject_code: str
    subject_name: str
    total_sessions: int
    present_count: int

    @property
    def percentage(self) -> float:
        return attendance_percentage(self.present_count, self.total_sessions)

    def as_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "subject_code": self.subject_code,
            "subject_name": self.subject_name,
            "total_sessions": self.total_sessions,
            "present_count": self.present_count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class SessionDetailRow:
    subject_label: str
    start_time: datetime
    end_time: datetime
    status: SessionOutcome

    def as_dict(self) -> dict:
        return {
            "subject_name": self.subject_label,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class CrossStudentReportPage:
    filter: ReportFilter
    search: str
    sort: Optional[str]
    direction: Optional[str]
    rows: list[StudentAttendanceRow]
    total_sessions: int
    # Side lists are only loaded for full page requests.
    classes: Optional[list[ClassRef]] = None
    subjects: Optional[list[SubjectRef]] = None

    def as_dict(self) -> dict:
        return {
            "filter": self.filter.as_dict(),
            "search": self.search,
            "sort": self.sort,
            "dir": self.direction,
            "total_sessions": self.total_sessions,
            "rows": [r.as_dict() for r in self.rows],
            "classes": [
                {"id": c.class_id, "code": c.code, "description": c.description} for c in self.classes or []
            ],
            "subjects": [
                {"id": s.subject_id, "code": s.code, "description": s.description} for s in self.subjects or []
            ],
        }


@dataclass(frozen=True)
class SubjectSummaryPage:
    sort: str
    direction: str
    rows: list[SubjectSummaryRow]

    def as_dict(self) -> dict:
        return {
            "sort": self.sort,
            "dir": self.direction,
            "rows": [r.as_dict() for r in self.rows],
        }
