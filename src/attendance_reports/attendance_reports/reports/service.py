from __future__ import annotations

import logging
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..catalog.repository import CatalogRepository
from ..core.constants import SORT_ASCENDING
from ..core.enums import AttendanceStatus, Role, SortKey
from ..core.exceptions import AuthorizationError
from ..sessions.filter import SessionFilter
from ..users.model import User
from ..users.repository import UserRepository
from .aggregator import AttendanceAggregator, matches_search
from .model import (
    CrossStudentReportPage,
    ReportRequest,
    SessionDetailRow,
    SubjectSummaryPage,
    ViewerContext,
)
from .scope import ScopeResolver, SubjectScope, require_role
from .sorting import RowSorter, is_ascending

logger = logging.getLogger(__name__)


class ReportService:
    """Use cases behind the report pages.

    Every method first resolves what the viewer may see (authorization
    failures short-circuit here), then reads a snapshot from the repositories
    and hands it to the aggregator. Repository errors propagate unchanged.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
        session_filter: SessionFilter,
        *,
        scope_resolver: Optional[ScopeResolver] = None,
        aggregator: Optional[AttendanceAggregator] = None,
    ):
        self._catalog = catalog
        self._users = users
        self._attendance = attendance
        self._session_filter = session_filter
        self._scopes = scope_resolver or ScopeResolver(catalog, users)
        self._aggregator = aggregator or AttendanceAggregator()
        self._student_sorter = RowSorter(name_key=SortKey.STUDENT_NAME, name_of=lambda r: r.student_name)
        self._subject_sorter = RowSorter(name_key=SortKey.SUBJECT_NAME, name_of=lambda r: r.subject_name)

    # ===== Admin / lecturer =====

    def cross_student_report(self, request: ReportRequest) -> CrossStudentReportPage:
        require_role(request.viewer, Role.ADMIN, Role.LECTURER)
        scope = self._scopes.resolve(request.viewer)
        f = request.filter

        selection = self._session_filter.select(
            subject_scope=scope.subject_ids,
            class_id=f.class_id,
            subject_id=f.subject_id,
            date_from=f.date_from,
            date_to=f.date_to,
        )

        class_ids = [f.class_id] if f.class_id else selection.class_ids
        students = [s for s in self._users.list_students(class_ids=class_ids) if matches_search(s, request.search)]

        records = self._attendance.list_for_sessions(selection.session_ids, status=AttendanceStatus.PRESENT)

        selected_class = self._catalog.get_class(f.class_id) if f.class_id else None
        selected_subject = None
        if f.subject_id and scope.allows(f.subject_id):
            found = self._catalog.list_subjects(subject_ids=[f.subject_id])
            selected_subject = found[0] if found else None

        rows = self._aggregator.cross_student_rows(
            selection=selection,
            students=students,
            records=records,
            selected_class=selected_class,
            subject_filter=f.subject_id,
            selected_subject=selected_subject,
        )
        rows = self._student_sorter.sort(rows, request.sort, request.direction, tiebreak=SortKey.STUDENT_NAME)

        logger.debug(
            "cross-student report for %s: %d sessions, %d rows (partial=%s)",
            request.viewer.user_id,
            len(selection),
            len(rows),
            request.partial,
        )

        classes = subjects = None
        if not request.partial:
            classes, subjects = self._selectable_options(request.viewer, scope)

        return CrossStudentReportPage(
            filter=f,
            search=request.search,
            sort=request.sort,
            direction=request.direction,
            rows=rows,
            total_sessions=len(selection),
            classes=classes,
            subjects=subjects,
        )

    def student_sessions(self, request: ReportRequest, *, student_id: str) -> list[SessionDetailRow]:
        """Drill-down for one student under the same filters as the cross-student report."""

        require_role(request.viewer, Role.ADMIN, Role.LECTURER)
        scope = self._scopes.resolve(request.viewer)
        f = request.filter

        selection = self._session_filter.select(
            subject_scope=scope.subject_ids,
            class_id=f.class_id,
            subject_id=f.subject_id,
            date_from=f.date_from,
            date_to=f.date_to,
        )
        records = self._attendance.list_for_sessions(selection.session_ids, student_id=student_id)
        return self._aggregator.session_detail_rows(selection=selection, student_id=student_id, records=records)

    def _selectable_options(self, viewer: ViewerContext, scope: SubjectScope):
        if viewer.role == Role.ADMIN or scope.unrestricted:
            classes = list(self._catalog.list_classes())
            subjects = list(self._catalog.list_subjects())
        else:
            class_ids = self._catalog.list_class_ids_for_subjects(scope.subject_ids)
            classes = list(self._catalog.list_classes(class_ids=class_ids))
            subjects = list(self._catalog.list_subjects(subject_ids=scope.subject_ids))
        return classes, subjects

    # ===== Student self service =====

    def _current_student(self, viewer: ViewerContext) -> User:
        require_role(viewer, Role.STUDENT)
        me = self._users.get_by_id(viewer.user_id)
        if me is None:
            logger.warning("student identity %s could not be resolved", viewer.user_id)
            raise AuthorizationError("Student profile not found")
        return me

    def my_summary(
        self,
        viewer: ViewerContext,
        *,
        sort: Optional[str] = None,
        direction: Optional[str] = None,
    ) -> SubjectSummaryPage:
        me = self._current_student(viewer)
        sort = sort or SortKey.SUBJECT_NAME.value
        direction = direction or SORT_ASCENDING

        if me.class_id is None:
            return SubjectSummaryPage(sort=sort, direction=direction, rows=[])

        scope = self._scopes.resolve(viewer)
        selection = self._session_filter.select(subject_scope=scope.subject_ids, class_id=me.class_id)
        if not selection:
            return SubjectSummaryPage(sort=sort, direction=direction, rows=[])

        records = self._attendance.list_for_sessions(
            selection.session_ids,
            student_id=me.user_id,
            status=AttendanceStatus.PRESENT,
        )
        rows = self._aggregator.subject_summary_rows(selection=selection, student_id=me.user_id, records=records)
        rows = self._subject_sorter.sort(rows, sort, direction, tiebreak=SortKey.SUBJECT_NAME)

        logger.debug("summary for student %s: %d subjects (ascending=%s)", me.user_id, len(rows), is_ascending(direction))
        return SubjectSummaryPage(sort=sort, direction=direction, rows=rows)

    def my_subject_sessions(self, viewer: ViewerContext, *, subject_id: str) -> list[SessionDetailRow]:
        me = self._current_student(viewer)
        if me.class_id is None:
            return []

        scope = self._scopes.resolve(viewer)
        selection = self._session_filter.select(
            subject_scope=scope.subject_ids,
            class_id=me.class_id,
            subject_id=subject_id,
        )
        records = self._attendance.list_for_sessions(selection.session_ids, student_id=me.user_id)
        return self._aggregator.session_detail_rows(selection=selection, student_id=me.user_id, records=records)
