from __future__ import annotations

from typing import Collection, Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_students(self, *, class_ids: Collection[str]) -> Sequence[User]:
        """Students assigned to any of ``class_ids``, ordered by full name."""

        raise NotImplementedError
