from __future__ import annotations

from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_sessions(
        self,
        session_ids: Collection[str],
        *,
        student_id: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records against ``session_ids``, optionally for one student and/or one status."""

        raise NotImplementedError
