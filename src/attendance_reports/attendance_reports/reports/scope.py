from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from ..catalog.repository import CatalogRepository
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..users.repository import UserRepository
from .model import ViewerContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubjectScope:
    """Subjects a viewer may report on. ``subject_ids=None`` means no restriction."""

    subject_ids: Optional[FrozenSet[str]]

    @property
    def unrestricted(self) -> bool:
        return self.subject_ids is None

    def allows(self, subject_id: str) -> bool:
        return self.subject_ids is None or subject_id in self.subject_ids


def require_role(viewer: ViewerContext, *roles: Role) -> None:
    if viewer.role not in roles:
        logger.warning("viewer %s with role %s denied (needs %s)", viewer.user_id, viewer.role.value, roles)
        raise AuthorizationError("You are not allowed to view this report")


class ScopeResolver:
    """Maps a viewer's role to the subjects they may see.

    - admin: every subject in the catalog
    - lecturer: exactly the assigned subjects; the lecturer must resolve to a user record
    - student: unrestricted (self reports are bounded by the student's own class instead)
    """

    def __init__(self, catalog: CatalogRepository, users: UserRepository):
        self._catalog = catalog
        self._users = users

    def resolve(self, viewer: ViewerContext) -> SubjectScope:
        if viewer.role == Role.ADMIN:
            return SubjectScope(frozenset(self._catalog.list_subject_ids()))

        if viewer.role == Role.LECTURER:
            lecturer = self._users.get_by_id(viewer.user_id)
            if lecturer is None or lecturer.role != Role.LECTURER:
                logger.warning("lecturer identity %s could not be resolved", viewer.user_id)
                raise AuthorizationError("Lecturer profile not found")
            assignments = self._catalog.list_assignments_for_lecturer(lecturer.user_id)
            return SubjectScope(frozenset(a.subject_id for a in assignments))

        if viewer.role == Role.STUDENT:
            return SubjectScope(None)

        raise AuthorizationError(f"Unsupported role: {viewer.role!r}")
