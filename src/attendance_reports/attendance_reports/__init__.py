"""Attendance Reports package.

Feature modules (catalog, sessions, users, attendance, reports) each expose a
read-only repository interface, a MySQL implementation, and, for reports, the
service and thin Flask controller layers.
"""
