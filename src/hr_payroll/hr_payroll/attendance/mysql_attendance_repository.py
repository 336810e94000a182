from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        on_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        where: list[str] = []
        params: list[Any] = []
        for clause, value in (
            ("a.employee_id=%s", employee_id),
            ("a.date=%s", on_date),
            ("a.date>=%s", start_date),
            ("a.date<=%s", end_date),
        ):
            if value is not None:
                where.append(clause)
                params.append(value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.id, a.employee_id, a.date, a.check_in_time, a.check_out_time, a.status, a.notes,
                       CONCAT(e.first_name, ' ', e.last_name) AS employee_name
                FROM attendance_records a
                JOIN employees e ON e.id = a.employee_id
                """
                + (" WHERE " + " AND ".join(where) if where else "")
                + " ORDER BY a.date DESC, a.id DESC",
                tuple(params),
            )
            return [
                AttendanceRecord(
                    record_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    date=as_date(r["date"]),
                    check_in_time=r.get("check_in_time"),
                    check_out_time=r.get("check_out_time"),
                    status=r["status"],
                    notes=r.get("notes"),
                    employee_name=(r.get("employee_name") or "").strip() or None,
                )
                for r in fetchall(cur)
            ]
