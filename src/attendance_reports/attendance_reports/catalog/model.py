from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ClassRef:
    """A class (cohort) that groups students."""

    class_id: str
    code: Optional[str]
    description: Optional[str] = None


@dataclass(frozen=True)
class SubjectRef:
    """A teachable unit."""

    subject_id: str
    code: Optional[str]
    description: Optional[str] = None


@dataclass(frozen=True)
class LecturerAssignment:
    lecturer_id: str
    subject_id: str
