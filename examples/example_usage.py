"""Example: call the report service directly (no Flask).

Controllers are a thin layer; the reporting rules live in the services.
"""

import importlib

from config import get_settings_module

from attendance_reports.container import build_container
from attendance_reports.core.enums import Role
from attendance_reports.reports.model import ReportRequest, ViewerContext


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    admin = ViewerContext(user_id="u0000000-0000-0000-0000-000000000001", role=Role.ADMIN)
    page = container.report_service.cross_student_report(ReportRequest(viewer=admin, sort="Percentage", direction="desc"))
    for row in page.rows:
        print(f"{row.student_name:<20} {row.present_count}/{row.total_sessions} {row.percentage:6.2f}%")


if __name__ == "__main__":
    main()
