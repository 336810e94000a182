from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_decimal, build_update, db_cursor, fetchall, fetchone, translate_duplicate
from .model import PAYROLL_AMOUNT_FIELDS, Payroll
from .repository import PayrollRepository

_SELECT = (
    "SELECT p.id, p.employee_id, p.pay_period_start, p.pay_period_end, p.payment_date, p.status, "
    + ", ".join(f"p.{c}" for c in PAYROLL_AMOUNT_FIELDS)
    + ", p.created_by, p.approved_by, p.approved_at, p.created_at, "
    + "CONCAT(e.first_name, ' ', e.last_name) AS employee_name "
    + "FROM payrolls p JOIN employees e ON e.id = p.employee_id"
)


def _row_to_payroll(r: dict) -> Payroll:
    return Payroll(
        payroll_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        pay_period_start=as_date(r["pay_period_start"]),
        pay_period_end=as_date(r["pay_period_end"]),
        payment_date=as_date(r["payment_date"]),
        status=PayrollStatus(r["status"]),
        amounts={c: as_decimal(r.get(c)) for c in PAYROLL_AMOUNT_FIELDS},
        employee_name=(r.get("employee_name") or "").strip() or None,
        created_by=r.get("created_by"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        created_at=r.get("created_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, *, employee_id: Optional[int] = None, status: Optional[PayrollStatus] = None) -> Sequence[Payroll]:
        where: list[str] = []
        params: list[Any] = []
        if employee_id is not None:
            where.append("p.employee_id=%s")
            params.append(employee_id)
        if status is not None:
            where.append("p.status=%s")
            params.append(status.value)
        sql = _SELECT + (" WHERE " + " AND ".join(where) if where else "") + " ORDER BY p.payment_date DESC, p.id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_payroll(r) for r in fetchall(cur)]

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE p.id=%s", (payroll_id,))
            row = fetchone(cur)
            return _row_to_payroll(row) if row else None

    def exists_for_month(self, employee_id: int, year: int, month: int, *, exclude_id: Optional[int] = None) -> bool:
        sql = "SELECT id FROM payrolls WHERE employee_id=%s AND pay_month=%s"
        params: list[Any] = [employee_id, year * 100 + month]
        if exclude_id is not None:
            sql += " AND id<>%s"
            params.append(exclude_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " LIMIT 1", tuple(params))
            return fetchone(cur) is not None

    def create(self, fields: dict[str, Any]) -> int:
        cols = list(fields)
        with translate_duplicate(
            "Payroll untuk karyawan ini pada bulan tersebut sudah ada",
            employee_id=fields.get("employee_id"),
        ):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO payrolls ({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                    tuple(fields[c] for c in cols),
                )
                return int(cur.lastrowid)

    def update(self, payroll_id: int, changes: dict[str, Any]) -> bool:
        if not changes:
            return True
        sql, params = build_update("payrolls", "id", payroll_id, changes)
        with translate_duplicate("Payroll untuk karyawan ini pada bulan tersebut sudah ada", id=payroll_id):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)
                return True

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payrolls WHERE id=%s", (payroll_id,))
            return cur.rowcount > 0
