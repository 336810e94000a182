from __future__ import annotations

from typing import Any, Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, build_update, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.id, e.user_id, e.first_name, e.last_name, e.email, e.phone_number, e.position,
           e.department_id, d.name AS department_name, e.hire_date, e.date_of_birth, e.address,
           e.bank_name, e.bank_account_number, e.nik, e.created_at
    FROM employees e
    LEFT JOIN departments d ON d.id = e.department_id
"""

# Tables holding rows owned by an employee, deleted before the employee itself.
_DEPENDENT_TABLES = ("leave_requests", "attendance_records", "izin_sakit", "payrolls", "leave_quotas", "salaries")


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["id"]),
        user_id=r.get("user_id"),
        first_name=r["first_name"],
        last_name=r.get("last_name") or "",
        email=r["email"],
        phone_number=r.get("phone_number"),
        position=r["position"],
        department_id=r.get("department_id"),
        department_name=r.get("department_name"),
        hire_date=as_date(r["hire_date"]),
        date_of_birth=as_date(r.get("date_of_birth")),
        address=r.get("address"),
        bank_name=r.get("bank_name"),
        bank_account_number=r.get("bank_account_number"),
        nik=r.get("nik"),
        created_at=r.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, params: tuple) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} LIMIT 1", params)
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY e.created_at DESC, e.id DESC")
            return [_row_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._one("e.id=%s", (employee_id,))

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        return self._one("e.user_id=%s", (user_id,))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._one("LOWER(e.email)=LOWER(%s)", (email,))

    def create(self, data: NewEmployee) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees
                        (user_id, first_name, last_name, email, phone_number, position, department_id,
                         hire_date, date_of_birth, address, bank_name, bank_account_number, nik)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        data.user_id,
                        data.first_name,
                        data.last_name,
                        data.email,
                        data.phone_number,
                        data.position,
                        data.department_id,
                        data.hire_date,
                        data.date_of_birth,
                        data.address,
                        data.bank_name,
                        data.bank_account_number,
                        data.nik,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            field = "nik" if "uq_employees_nik" in str(e) else "email"
            raise ConflictError(
                "NIK sudah digunakan" if field == "nik" else "Email sudah digunakan",
                details={"field": field, "value": data.nik if field == "nik" else data.email},
            ) from e

    def update(self, employee_id: int, changes: dict[str, Any]) -> bool:
        if not changes:
            return True
        sql, params = build_update("employees", "id", employee_id, changes)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)
                return True
        except mysql.connector.IntegrityError as e:
            if not is_duplicate_key(e):
                raise
            raise ConflictError("NIK atau email sudah digunakan", details={"id": employee_id}) from e

    def delete_cascade(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            for table in _DEPENDENT_TABLES:
                cur.execute(f"DELETE FROM {table} WHERE employee_id=%s", (employee_id,))
            cur.execute("UPDATE users SET employee_id=NULL WHERE employee_id=%s", (employee_id,))
            cur.execute("DELETE FROM employees WHERE id=%s", (employee_id,))
            return cur.rowcount > 0
