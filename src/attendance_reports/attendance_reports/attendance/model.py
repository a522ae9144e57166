from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance scan of a student against a session.

    Several records may exist for the same (student, session) pair. ``status``
    is the stored code; codes outside ``AttendanceStatus`` are kept as plain
    ints and count as not present.
    """

    attendance_id: str
    student_id: str
    session_id: str
    status: int
    scan_time: datetime

    @property
    def is_present(self) -> bool:
        return self.status == AttendanceStatus.PRESENT
