from __future__ import annotations

from typing import Collection, Optional, Protocol, Sequence

from .model import ClassRef, LecturerAssignment, SubjectRef


class CatalogRepository(Protocol):
    """Read access to classes, subjects and lecturer assignments."""

    def get_class(self, class_id: str) -> Optional[ClassRef]:
        raise NotImplementedError

    def list_classes(self, *, class_ids: Optional[Collection[str]] = None) -> Sequence[ClassRef]:
        """All classes ordered by code; ``class_ids`` narrows the result."""

        raise NotImplementedError

    def list_subjects(self, *, subject_ids: Optional[Collection[str]] = None) -> Sequence[SubjectRef]:
        """All subjects ordered by code; ``subject_ids`` narrows the result."""

        raise NotImplementedError

    def list_subject_ids(self) -> Sequence[str]:
        raise NotImplementedError

    def list_assignments_for_lecturer(self, lecturer_id: str) -> Sequence[LecturerAssignment]:
        """Subjects assigned to ``lecturer_id``."""

        raise NotImplementedError

    def list_class_ids_for_subjects(self, subject_ids: Collection[str]) -> Sequence[str]:
        """Classes that have at least one session for one of ``subject_ids``."""

        raise NotImplementedError
