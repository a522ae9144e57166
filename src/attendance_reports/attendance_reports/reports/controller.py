from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request, session

from ..common.datetime_utils import parse_optional_date
from ..common.validators import optional_id, optional_text, require_non_empty
from ..core.constants import PARTIAL_REQUEST_HEADER, PARTIAL_REQUEST_VALUE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .model import ReportFilter, ReportRequest, ViewerContext

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def roles_required(*roles: Role):
        """Guard a view on the identity stored in the Flask session by the login layer."""

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if "user_id" not in session or "role" not in session:
                    return jsonify({"error": "Authentication required"}), 401

                try:
                    role = Role(session.get("role"))
                except ValueError:
                    return jsonify({"error": "Forbidden"}), 403
                if role not in roles:
                    return jsonify({"error": "Forbidden"}), 403

                g.viewer = ViewerContext(user_id=str(session["user_id"]), role=role)
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def _is_partial() -> bool:
        if request.headers.get(PARTIAL_REQUEST_HEADER) == PARTIAL_REQUEST_VALUE:
            return True
        return request.args.get("partial", "").lower() in {"1", "true", "yes"}

    def _report_filter() -> ReportFilter:
        return ReportFilter(
            class_id=optional_id(request.args.get("class_id")),
            subject_id=optional_id(request.args.get("subject_id")),
            date_from=parse_optional_date(request.args.get("from"), "from"),
            date_to=parse_optional_date(request.args.get("to"), "to"),
        )

    def _report_request() -> ReportRequest:
        return ReportRequest(
            viewer=g.viewer,
            filter=_report_filter(),
            search=optional_text(request.args.get("search")),
            sort=optional_id(request.args.get("sort")),
            direction=optional_id(request.args.get("dir")),
            partial=_is_partial(),
        )

    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def _authorization_error(e: AuthorizationError):
        return jsonify({"error": str(e)}), 401

    # ===== Admin / lecturer =====

    @app.route("/report", methods=["GET"], endpoint="report_view")
    @roles_required(Role.ADMIN, Role.LECTURER)
    def report_view():
        report_request = _report_request()
        page = container.report_service.cross_student_report(report_request)

        if report_request.partial:
            return jsonify({"rows": [r.as_dict() for r in page.rows]})
        return jsonify(page.as_dict())

    @app.route("/report/student-sessions", methods=["GET"], endpoint="report_student_sessions")
    @roles_required(Role.ADMIN, Role.LECTURER)
    def report_student_sessions():
        student_id = require_non_empty(request.args.get("student_id"), "student_id")
        rows = container.report_service.student_sessions(_report_request(), student_id=student_id)
        return jsonify({"rows": [r.as_dict() for r in rows]})

    # ===== Student self service =====

    @app.route("/me/summary", methods=["GET"], endpoint="my_summary")
    @roles_required(Role.STUDENT)
    def my_summary():
        page = container.report_service.my_summary(
            g.viewer,
            sort=optional_id(request.args.get("sort")),
            direction=optional_id(request.args.get("dir")),
        )
        if _is_partial():
            return jsonify({"rows": [r.as_dict() for r in page.rows]})
        return jsonify(page.as_dict())

    @app.route("/me/summary/sessions", methods=["GET"], endpoint="my_subject_sessions")
    @roles_required(Role.STUDENT)
    def my_subject_sessions():
        subject_id = require_non_empty(request.args.get("subject_id"), "subject_id")
        rows = container.report_service.my_subject_sessions(g.viewer, subject_id=subject_id)
        return jsonify({"rows": [r.as_dict() for r in rows]})
