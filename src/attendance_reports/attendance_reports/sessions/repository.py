from __future__ import annotations

from typing import Protocol, Sequence

from .model import Session, SessionQuery


class SessionRepository(Protocol):
    def find(self, query: SessionQuery) -> Sequence[Session]:
        """Sessions matching ``query`` with class and subject resolved, ordered by start time."""

        raise NotImplementedError
