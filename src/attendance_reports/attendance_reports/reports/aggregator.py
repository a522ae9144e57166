from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..catalog.model import ClassRef, SubjectRef
from ..core.constants import MISSING_LABEL, OVERALL_SUBJECT_CODE, OVERALL_SUBJECT_NAME
from ..core.enums import SessionOutcome
from ..sessions.filter import SessionSelection
from ..sessions.model import Session
from ..users.model import User
from .model import SessionDetailRow, StudentAttendanceRow, SubjectSummaryRow


def subject_label(subject: Optional[SubjectRef]) -> str:
    """``"CODE - Description"``, or whichever part is non-blank, or ``"-"``."""

    if subject is None:
        return MISSING_LABEL
    code = (subject.code or "").strip()
    name = (subject.description or "").strip()
    if code and name:
        return f"{code} - {name}"
    return code or name or MISSING_LABEL


def matches_search(user: User, term: str) -> bool:
    """Case-sensitive substring match on full name or email."""

    if not term:
        return True
    return term in (user.full_name or "") or term in (user.email or "")


def present_sessions_by_student(
    records: Iterable[AttendanceRecord], session_ids: frozenset[str]
) -> dict[str, set[str]]:
    """Distinct sessions with at least one PRESENT record, per student."""

    out: dict[str, set[str]] = {}
    for r in records:
        if r.is_present and r.session_id in session_ids:
            out.setdefault(r.student_id, set()).add(r.session_id)
    return out


@dataclass(frozen=True)
class _SubjectHeading:
    code: Optional[str]
    name: Optional[str]


class AttendanceAggregator:
    """Joins attendance records to sessions and students and builds report rows.

    All joins are explicit dictionary lookups keyed by session id or student id;
    nothing here talks to the store.
    """

    # Mode A

    def cross_student_rows(
        self,
        *,
        selection: SessionSelection,
        students: Sequence[User],
        records: Iterable[AttendanceRecord],
        selected_class: Optional[ClassRef] = None,
        subject_filter: Optional[str] = None,
        selected_subject: Optional[SubjectRef] = None,
    ) -> list[StudentAttendanceRow]:
        """One row per student.

        ``subject_filter`` is the subject id the caller asked for (the
        denominator switches to that subject); ``selected_subject`` is its
        catalog entry when visible to the viewer.
        """

        session_ids = selection.session_ids
        records = list(records)
        present_by_student = present_sessions_by_student(records, session_ids)
        recent_by_student = self._most_recent_present(records, selection)

        totals_by_class: Counter[str] = Counter()
        totals_by_class_subject: Counter[tuple[str, str]] = Counter()
        for s in selection:
            if s.class_id is None:
                continue
            totals_by_class[s.class_id] += 1
            if s.subject_id is not None:
                totals_by_class_subject[(s.class_id, s.subject_id)] += 1

        heading = self._subject_heading(selection, subject_filter, selected_subject)

        rows: list[StudentAttendanceRow] = []
        for stu in students:
            if stu.class_id is None:
                continue

            if subject_filter is None:
                total = totals_by_class[stu.class_id]
            else:
                total = totals_by_class_subject[(stu.class_id, subject_filter)]

            present = min(len(present_by_student.get(stu.user_id, ())), total)

            class_ref = selected_class or stu.class_ref
            recent = recent_by_student.get(stu.user_id)

            rows.append(
                StudentAttendanceRow(
                    student_id=stu.user_id,
                    student_name=stu.display_name,
                    student_email=stu.email,
                    class_code=class_ref.code if class_ref else None,
                    class_name=class_ref.description if class_ref else None,
                    subject_code=heading.code,
                    subject_name=heading.name,
                    total_sessions=total,
                    present_count=present,
                    recent_subject_code=(
                        recent.subject_ref.code if recent is not None and recent.subject_ref else None
                    ),
                    recent_start_time=recent.start_time if recent is not None else None,
                    recent_end_time=recent.end_time if recent is not None else None,
                )
            )
        return rows

    @staticmethod
    def _subject_heading(
        selection: SessionSelection,
        subject_filter: Optional[str],
        selected_subject: Optional[SubjectRef],
    ) -> _SubjectHeading:
        if subject_filter is not None:
            if selected_subject is None:
                return _SubjectHeading(code=None, name=None)
            return _SubjectHeading(code=selected_subject.code, name=selected_subject.description)

        subject_ids = selection.subject_ids
        if len(subject_ids) == 1:
            only = next(s.subject_ref for s in selection if s.subject_ref is not None)
            return _SubjectHeading(code=only.code, name=only.description)

        return _SubjectHeading(code=OVERALL_SUBJECT_CODE, name=OVERALL_SUBJECT_NAME)

    @staticmethod
    def _most_recent_present(
        records: Iterable[AttendanceRecord], selection: SessionSelection
    ) -> dict[str, Session]:
        """Session of each student's latest PRESENT scan within the selection.

        Equal scan times go to the session that starts later, then to the
        record seen first.
        """

        by_id: Mapping[str, Session] = {s.session_id: s for s in selection}
        latest: dict[str, AttendanceRecord] = {}
        for r in records:
            if not r.is_present or r.session_id not in by_id:
                continue
            current = latest.get(r.student_id)
            if current is None:
                latest[r.student_id] = r
                continue
            candidate_key = (r.scan_time, by_id[r.session_id].start_time)
            current_key = (current.scan_time, by_id[current.session_id].start_time)
            if candidate_key > current_key:
                latest[r.student_id] = r
        return {student_id: by_id[r.session_id] for student_id, r in latest.items()}

    # Mode B

    def subject_summary_rows(
        self,
        *,
        selection: SessionSelection,
        student_id: str,
        records: Iterable[AttendanceRecord],
    ) -> list[SubjectSummaryRow]:
        """One row per subject taught to the student's class, in order of first session."""

        present = present_sessions_by_student(records, selection.session_ids).get(student_id, set())

        grouped: dict[str, list[Session]] = {}
        for s in selection:
            if s.subject_id is None:
                continue
            grouped.setdefault(s.subject_id, []).append(s)

        rows: list[SubjectSummaryRow] = []
        for subject_id, sessions in grouped.items():
            subject = sessions[0].subject_ref
            total = len(sessions)
            attended = sum(1 for s in sessions if s.session_id in present)
            rows.append(
                SubjectSummaryRow(
                    subject_id=subject_id,
                    subject_code=(subject.code or MISSING_LABEL).strip() if subject else MISSING_LABEL,
                    subject_name=(subject.description or MISSING_LABEL).strip() if subject else MISSING_LABEL,
                    total_sessions=total,
                    present_count=min(attended, total),
                )
            )
        return rows

    # Mode C

    def session_detail_rows(
        self,
        *,
        selection: SessionSelection,
        student_id: str,
        records: Iterable[AttendanceRecord],
    ) -> list[SessionDetailRow]:
        present = present_sessions_by_student(records, selection.session_ids).get(student_id, set())
        return [
            SessionDetailRow(
                subject_label=subject_label(s.subject_ref),
                start_time=s.start_time,
                end_time=s.end_time,
                status=SessionOutcome.PRESENT if s.session_id in present else SessionOutcome.ABSENT,
            )
            for s in selection
        ]
