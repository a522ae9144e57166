from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Optional, Sequence

from ..common.datetime_utils import start_of_day, start_of_next_day
from .model import Session, SessionQuery
from .repository import SessionRepository


@dataclass(frozen=True)
class SessionSelection:
    """In-scope sessions of one report request, ordered by start time."""

    sessions: tuple[Session, ...]

    @property
    def session_ids(self) -> FrozenSet[str]:
        return frozenset(s.session_id for s in self.sessions)

    @property
    def class_ids(self) -> list[str]:
        """Referenced class ids in first-seen order."""
        return list(dict.fromkeys(s.class_id for s in self.sessions if s.class_id is not None))

    @property
    def subject_ids(self) -> list[str]:
        return list(dict.fromkeys(s.subject_id for s in self.sessions if s.subject_id is not None))

    def __len__(self) -> int:
        return len(self.sessions)

    def __iter__(self):
        return iter(self.sessions)


class SessionFilter:
    """Selects the sessions a report is computed over.

    Filters combine with AND; an absent filter adds no constraint. ``date_to``
    is inclusive and becomes a start-of-next-day exclusive bound. Only the
    session start time is compared against the date range.
    """

    def __init__(self, sessions: SessionRepository):
        self._sessions = sessions

    @staticmethod
    def build_query(
        *,
        subject_scope: Optional[FrozenSet[str]],
        class_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> SessionQuery:
        return SessionQuery(
            subject_ids=subject_scope,
            class_id=class_id,
            subject_id=subject_id,
            start_from=start_of_day(date_from) if date_from else None,
            start_before=start_of_next_day(date_to) if date_to else None,
        )

    def select(
        self,
        *,
        subject_scope: Optional[FrozenSet[str]],
        class_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> SessionSelection:
        query = self.build_query(
            subject_scope=subject_scope,
            class_id=class_id,
            subject_id=subject_id,
            date_from=date_from,
            date_to=date_to,
        )
        found: Sequence[Session] = self._sessions.find(query)
        # sorted() is stable, so store order survives for equal start times.
        matched = sorted((s for s in found if query.matches(s)), key=lambda s: s.start_time)
        return SessionSelection(sessions=tuple(matched))
