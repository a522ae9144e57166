from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional

from ..catalog.model import ClassRef, SubjectRef


@dataclass(frozen=True)
class Session:
    """A scheduled class occurrence requiring attendance."""

    session_id: str
    class_ref: Optional[ClassRef]
    subject_ref: Optional[SubjectRef]
    start_time: datetime
    end_time: datetime

    @property
    def class_id(self) -> Optional[str]:
        return self.class_ref.class_id if self.class_ref else None

    @property
    def subject_id(self) -> Optional[str]:
        return self.subject_ref.subject_id if self.subject_ref else None


@dataclass(frozen=True)
class SessionQuery:
    """Store-level session query.

    ``subject_ids=None`` means no subject restriction; sessions without a
    subject are always excluded. Start-time bounds are half-open:
    ``start_from <= start_time < start_before``.
    """

    subject_ids: Optional[FrozenSet[str]] = None
    class_id: Optional[str] = None
    subject_id: Optional[str] = None
    start_from: Optional[datetime] = None
    start_before: Optional[datetime] = None

    def matches(self, session: Session) -> bool:
        if session.subject_id is None:
            return False
        if self.subject_ids is not None and session.subject_id not in self.subject_ids:
            return False
        if self.class_id is not None and session.class_id != self.class_id:
            return False
        if self.subject_id is not None and session.subject_id != self.subject_id:
            return False
        if self.start_from is not None and session.start_time < self.start_from:
            return False
        if self.start_before is not None and session.start_time >= self.start_before:
            return False
        return True
