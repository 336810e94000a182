from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import ReportRepository


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def employee_rows(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.nik, e.first_name, e.last_name, e.email, d.name AS department_name,
                       e.position, e.hire_date, e.created_at
                FROM employees e
                LEFT JOIN departments d ON d.id = e.department_id
                ORDER BY e.created_at DESC
                """
            )
            return fetchall(cur)

    def leave_rows(self, *, start_date: date, end_date: date) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.nik, e.first_name, e.last_name, d.name AS department_name,
                       lr.leave_type, lr.start_date, lr.end_date, lr.reason, lr.status,
                       ua.username AS approved_by_name, ur.username AS rejected_by_name, lr.created_at
                FROM leave_requests lr
                JOIN employees e ON e.id = lr.employee_id
                LEFT JOIN departments d ON d.id = e.department_id
                LEFT JOIN users ua ON ua.id = lr.approved_by
                LEFT JOIN users ur ON ur.id = lr.rejected_by
                WHERE lr.created_at >= %s AND lr.created_at < %s
                ORDER BY lr.created_at DESC
                """,
                (start_date, end_date + timedelta(days=1)),
            )
            return fetchall(cur)

    def attendance_rows(self, *, start_date: date, end_date: date) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT e.nik, e.first_name, e.last_name, d.name AS department_name,
                       a.date, a.check_in_time, a.check_out_time, a.status, a.notes
                FROM attendance_records a
                JOIN employees e ON e.id = a.employee_id
                LEFT JOIN departments d ON d.id = e.department_id
                WHERE a.date BETWEEN %s AND %s
                ORDER BY a.date DESC
                """,
                (start_date, end_date),
            )
            return fetchall(cur)
