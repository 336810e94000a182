from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Sequence

from ..core.constants import ALLOWANCE_FIELDS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_update, db_cursor, fetchall, fetchone, translate_duplicate
from .model import Salary
from .repository import SalaryRepository

_COLUMNS = "s.id, s.employee_id, s.nik, s.basic_salary, " + ", ".join(f"s.{c}" for c in ALLOWANCE_FIELDS) + ", s.created_at, s.updated_at"


def _row_to_salary(r: dict) -> Salary:
    return Salary(
        salary_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        nik=r["nik"],
        basic_salary=as_decimal(r["basic_salary"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        **{c: as_decimal(r.get(c)) for c in ALLOWANCE_FIELDS},
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, params: tuple) -> Optional[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salaries s WHERE {where} LIMIT 1", params)
            row = fetchone(cur)
            return _row_to_salary(row) if row else None

    def list_all(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.first_name, e.last_name, d.name AS department_name
                FROM salaries s
                JOIN employees e ON e.id = s.employee_id
                LEFT JOIN departments d ON d.id = e.department_id
                ORDER BY e.first_name, e.last_name
                """
            )
            out: list[dict] = []
            for r in fetchall(cur):
                row = _row_to_salary(r).to_dict()
                row["employee_name"] = f"{r['first_name']} {r.get('last_name') or ''}".strip()
                row["department_name"] = r.get("department_name")
                out.append(row)
            return out

    def get_by_id(self, salary_id: int) -> Optional[Salary]:
        return self._one("s.id=%s", (salary_id,))

    def get_by_employee_id(self, employee_id: int) -> Optional[Salary]:
        return self._one("s.employee_id=%s", (employee_id,))

    def get_by_nik(self, nik: str) -> Optional[Salary]:
        return self._one("s.nik=%s", (nik,))

    def create(
        self,
        *,
        employee_id: int,
        nik: str,
        basic_salary: Decimal,
        allowances: dict[str, Optional[Decimal]],
    ) -> int:
        cols = ("employee_id", "nik", "basic_salary") + ALLOWANCE_FIELDS
        values = (employee_id, nik, basic_salary) + tuple(allowances.get(c) for c in ALLOWANCE_FIELDS)
        with translate_duplicate("Data gaji untuk karyawan/NIK ini sudah ada", employee_id=employee_id, nik=nik):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO salaries ({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                    values,
                )
                return int(cur.lastrowid)

    def update(self, salary_id: int, changes: dict[str, Any]) -> bool:
        if not changes:
            return True
        sql, params = build_update("salaries", "id", salary_id, changes)
        with translate_duplicate("Data gaji untuk karyawan/NIK ini sudah ada", id=salary_id):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)
                return True

    def delete(self, salary_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salaries WHERE id=%s", (salary_id,))
            return cur.rowcount > 0
