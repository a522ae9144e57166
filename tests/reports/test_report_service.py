from __future__ import annotations

from datetime import date, datetime

import pytest

from attendance_reports.core.enums import AttendanceStatus, Role, SessionOutcome
from attendance_reports.core.exceptions import AuthorizationError
from attendance_reports.reports.model import ReportFilter, ReportRequest, ViewerContext

ADMIN = ViewerContext(user_id="admin", role=Role.ADMIN)
LECTURER = ViewerContext(user_id="lec", role=Role.LECTURER)
ALICE = ViewerContext(user_id="alice", role=Role.STUDENT)


@pytest.fixture
def campus(store):
    """Two classes, two subjects, one lecturer teaching CS101 only."""

    store.add_class("c", code="DIT1", description="Diploma IT 1")
    store.add_class("d", code="DIT2", description="Diploma IT 2")
    store.add_subject("s1", code="CS101", description="Programming")
    store.add_subject("s2", code="MA101", description="Maths")

    store.add_user("admin", Role.ADMIN, full_name="Admin")
    store.add_lecturer("lec", "s1")

    store.add_student("alice", "Alice Nguyen", email="a.nguyen@uni.edu", class_id="c")
    store.add_student("bob", "Bob Tran", email="bobby@uni.edu", class_id="c")
    store.add_student("dave", "Dave Le", email="dave@uni.edu", class_id="d")

    store.add_session("c-s1-1", class_id="c", subject_id="s1", start=datetime(2026, 3, 2, 9))
    store.add_session("c-s2-1", class_id="c", subject_id="s2", start=datetime(2026, 3, 3, 14))
    store.add_session("d-s1-1", class_id="d", subject_id="s1", start=datetime(2026, 3, 4, 9))
    store.add_session("c-s1-2", class_id="c", subject_id="s1", start=datetime(2026, 3, 9, 9))

    store.scan("alice", "c-s1-1")
    store.scan("alice", "c-s2-1")
    store.scan("bob", "c-s1-2")
    store.scan("dave", "d-s1-1", status=AttendanceStatus.LATE)
    return store


def _request(viewer, **kwargs) -> ReportRequest:
    filter_args = {k: kwargs.pop(k) for k in ("class_id", "subject_id", "date_from", "date_to") if k in kwargs}
    return ReportRequest(viewer=viewer, filter=ReportFilter(**filter_args), **kwargs)


def _by_student(page):
    return {r.student_id: r for r in page.rows}


# ===== Cross-student report =====


def test_admin_overall_report(campus, report_service):
    page = report_service.cross_student_report(_request(ADMIN))

    assert page.total_sessions == 4
    rows = _by_student(page)
    assert [r.student_name for r in page.rows] == ["Alice Nguyen", "Bob Tran", "Dave Le"]
    assert (rows["alice"].total_sessions, rows["alice"].present_count, rows["alice"].percentage) == (3, 2, 66.67)
    assert (rows["bob"].total_sessions, rows["bob"].present_count) == (3, 1)
    assert (rows["dave"].total_sessions, rows["dave"].present_count) == (1, 0)
    assert {(r.subject_code, r.subject_name) for r in page.rows} == {("-", "Overall")}


def test_lecturer_only_counts_assigned_subject(campus, report_service):
    page = report_service.cross_student_report(_request(LECTURER, class_id="c"))

    assert page.total_sessions == 2
    rows = _by_student(page)
    assert set(rows) == {"alice", "bob"}
    assert (rows["alice"].total_sessions, rows["alice"].present_count) == (2, 1)
    assert (rows["alice"].subject_code, rows["alice"].subject_name) == ("CS101", "Programming")
    assert (rows["alice"].class_code, rows["alice"].class_name) == ("DIT1", "Diploma IT 1")


def test_lecturer_subject_outside_scope_gives_empty_denominators(campus, report_service):
    page = report_service.cross_student_report(_request(LECTURER, class_id="c", subject_id="s2"))

    assert page.total_sessions == 0
    assert [r.student_id for r in page.rows] == ["alice", "bob"]
    for row in page.rows:
        assert (row.total_sessions, row.present_count, row.percentage) == (0, 0, 0.0)
        assert row.subject_code is None and row.subject_name is None


def test_explicit_subject_uses_its_label(campus, report_service):
    page = report_service.cross_student_report(_request(ADMIN, class_id="c", subject_id="s2"))

    rows = _by_student(page)
    assert (rows["alice"].subject_code, rows["alice"].subject_name) == ("MA101", "Maths")
    assert (rows["alice"].total_sessions, rows["alice"].present_count) == (1, 1)
    assert (rows["bob"].total_sessions, rows["bob"].present_count) == (1, 0)


def test_date_range_is_inclusive_of_end_day(campus, report_service):
    page = report_service.cross_student_report(
        _request(ADMIN, date_from=date(2026, 3, 3), date_to=date(2026, 3, 4))
    )

    assert page.total_sessions == 2
    rows = _by_student(page)
    assert (rows["alice"].total_sessions, rows["alice"].present_count) == (1, 1)
    assert (rows["dave"].total_sessions, rows["dave"].present_count) == (1, 0)


def test_population_without_class_filter_comes_from_selected_sessions(campus, report_service):
    page = report_service.cross_student_report(_request(ADMIN, date_from=date(2026, 3, 4), date_to=date(2026, 3, 4)))

    assert [r.student_id for r in page.rows] == ["dave"]


def test_class_filter_lists_students_even_without_sessions(campus, report_service):
    campus.add_class("e", code="DIT3")
    campus.add_student("erin", "Erin Vo", class_id="e")

    page = report_service.cross_student_report(_request(ADMIN, class_id="e"))

    assert page.total_sessions == 0
    assert [(r.student_id, r.total_sessions, r.percentage) for r in page.rows] == [("erin", 0, 0.0)]


def test_student_without_class_is_left_out(campus, report_service):
    campus.add_student("nc", "No Class")

    page = report_service.cross_student_report(_request(ADMIN))

    assert "nc" not in _by_student(page)


def test_search_matches_email_only(campus, report_service):
    page = report_service.cross_student_report(_request(ADMIN, class_id="c", search="bobby"))

    assert [r.student_id for r in page.rows] == ["bob"]
    assert page.rows[0].total_sessions == 3
    assert page.search == "bobby"


def test_search_is_case_sensitive(campus, report_service):
    assert report_service.cross_student_report(_request(ADMIN, search="ali")).rows == []
    assert [r.student_id for r in report_service.cross_student_report(_request(ADMIN, search="Ali")).rows] == ["alice"]


def test_sort_by_percentage_descending(campus, report_service):
    page = report_service.cross_student_report(_request(ADMIN, sort="Percentage", direction="desc"))

    assert [r.student_id for r in page.rows] == ["alice", "bob", "dave"]


def test_sort_by_percentage_ascending(campus, report_service):
    page = report_service.cross_student_report(_request(ADMIN, sort="Percentage", direction="asc"))

    assert [r.student_id for r in page.rows] == ["dave", "bob", "alice"]


def test_unknown_sort_falls_back_to_name_ascending(campus, report_service):
    page = report_service.cross_student_report(_request(ADMIN, sort="Shoe size", direction="desc"))

    assert [r.student_id for r in page.rows] == ["alice", "bob", "dave"]


def test_report_is_idempotent(campus, report_service):
    req = _request(ADMIN, class_id="c", sort="Percentage", direction="desc")

    assert report_service.cross_student_report(req) == report_service.cross_student_report(req)


def test_full_page_carries_side_lists_for_admin(campus, report_service):
    campus.add_class("e", code="DIT3")

    page = report_service.cross_student_report(_request(ADMIN))

    assert [c.code for c in page.classes] == ["DIT1", "DIT2", "DIT3"]
    assert [s.code for s in page.subjects] == ["CS101", "MA101"]


def test_full_page_side_lists_follow_lecturer_scope(campus, report_service):
    page = report_service.cross_student_report(_request(LECTURER))

    assert [c.code for c in page.classes] == ["DIT1", "DIT2"]
    assert [s.code for s in page.subjects] == ["CS101"]


def test_partial_request_skips_side_lists(campus, report_service):
    page = report_service.cross_student_report(_request(ADMIN, partial=True))

    assert page.classes is None and page.subjects is None
    assert "catalog.list_classes" not in campus.calls
    assert "catalog.list_subjects" not in campus.calls
    assert len(page.rows) == 3


def test_student_viewer_is_rejected_before_any_read(campus, report_service):
    with pytest.raises(AuthorizationError):
        report_service.cross_student_report(_request(ALICE))

    assert campus.calls == []


def test_unknown_lecturer_is_rejected(campus, report_service):
    ghost = ViewerContext(user_id="ghost", role=Role.LECTURER)

    with pytest.raises(AuthorizationError):
        report_service.cross_student_report(_request(ghost))

    assert "sessions.find" not in campus.calls


def test_page_as_dict_echoes_filters(campus, report_service):
    page = report_service.cross_student_report(
        _request(ADMIN, class_id="c", date_from=date(2026, 3, 1), sort="Percentage", direction="desc")
    )

    payload = page.as_dict()
    assert payload["filter"] == {"class_id": "c", "subject_id": None, "from": "2026-03-01", "to": None}
    assert payload["sort"] == "Percentage"
    assert payload["dir"] == "desc"
    assert payload["total_sessions"] == 3
    assert payload["rows"][0]["percentage"] == 66.67
    assert payload["rows"][0]["recent_subject_code"] == "MA101"
    assert {"id": "c", "code": "DIT1", "description": "Diploma IT 1"} in payload["classes"]


# ===== Drill-down =====


def test_student_sessions_drill_down(campus, report_service):
    rows = report_service.student_sessions(_request(ADMIN, class_id="c"), student_id="alice")

    assert [(r.subject_label, r.status) for r in rows] == [
        ("CS101 - Programming", SessionOutcome.PRESENT),
        ("MA101 - Maths", SessionOutcome.PRESENT),
        ("CS101 - Programming", SessionOutcome.ABSENT),
    ]


def test_student_sessions_respects_lecturer_scope(campus, report_service):
    rows = report_service.student_sessions(_request(LECTURER, class_id="c"), student_id="alice")

    assert [r.start_time for r in rows] == [datetime(2026, 3, 2, 9), datetime(2026, 3, 9, 9)]


def test_student_sessions_rejects_students(campus, report_service):
    with pytest.raises(AuthorizationError):
        report_service.student_sessions(_request(ALICE), student_id="alice")


# ===== Student self service =====


def test_my_summary_defaults_to_subject_name_ascending(campus, report_service):
    page = report_service.my_summary(ALICE)

    assert (page.sort, page.direction) == ("SubjectName", "asc")
    assert [(r.subject_name, r.total_sessions, r.present_count, r.percentage) for r in page.rows] == [
        ("Maths", 1, 1, 100.0),
        ("Programming", 2, 1, 50.0),
    ]


def test_my_summary_sorted_by_percentage(campus, report_service):
    page = report_service.my_summary(ALICE, sort="Percentage", direction="asc")

    assert [r.subject_code for r in page.rows] == ["CS101", "MA101"]


def test_my_summary_only_counts_own_scans(campus, report_service):
    page = report_service.my_summary(ViewerContext(user_id="bob", role=Role.STUDENT))

    assert [(r.subject_code, r.present_count) for r in page.rows] == [("MA101", 0), ("CS101", 1)]


def test_my_summary_without_class_is_empty(campus, report_service):
    campus.add_student("nc", "No Class")

    page = report_service.my_summary(ViewerContext(user_id="nc", role=Role.STUDENT))

    assert page.rows == []
    assert "sessions.find" not in campus.calls


def test_my_summary_without_sessions_is_empty(campus, report_service):
    campus.add_class("e")
    campus.add_student("erin", "Erin Vo", class_id="e")

    page = report_service.my_summary(ViewerContext(user_id="erin", role=Role.STUDENT))

    assert page.rows == []
    assert "attendance.list_for_sessions" not in campus.calls


def test_my_summary_requires_student_role(campus, report_service):
    with pytest.raises(AuthorizationError):
        report_service.my_summary(ADMIN)


def test_my_summary_requires_known_student(campus, report_service):
    with pytest.raises(AuthorizationError):
        report_service.my_summary(ViewerContext(user_id="nobody", role=Role.STUDENT))


def test_my_subject_sessions(campus, report_service):
    rows = report_service.my_subject_sessions(ALICE, subject_id="s1")

    assert [(r.start_time, r.status) for r in rows] == [
        (datetime(2026, 3, 2, 9), SessionOutcome.PRESENT),
        (datetime(2026, 3, 9, 9), SessionOutcome.ABSENT),
    ]
    assert rows[0].as_dict()["subject_name"] == "CS101 - Programming"
    assert rows[1].as_dict()["status"] == "Absent"


def test_my_subject_sessions_without_class_is_empty(campus, report_service):
    campus.add_student("nc", "No Class")

    assert report_service.my_subject_sessions(ViewerContext(user_id="nc", role=Role.STUDENT), subject_id="s1") == []


def test_unrecognised_status_code_counts_as_absent(campus, report_service):
    campus.scan("bob", "c-s1-1", status=3)

    rows = report_service.my_subject_sessions(ViewerContext(user_id="bob", role=Role.STUDENT), subject_id="s1")

    assert [r.status for r in rows] == [SessionOutcome.ABSENT, SessionOutcome.PRESENT]
