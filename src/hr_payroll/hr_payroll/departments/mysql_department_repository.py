from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_duplicate
from .model import Department
from .repository import DepartmentRepository


def _row_to_department(r: dict) -> Department:
    return Department(department_id=int(r["id"]), name=r["name"], created_at=r.get("created_at"))


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_at FROM departments ORDER BY name")
            return [_row_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_at FROM departments WHERE id=%s", (department_id,))
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, created_at FROM departments WHERE LOWER(name)=LOWER(%s) LIMIT 1",
                (name,),
            )
            row = fetchone(cur)
            return _row_to_department(row) if row else None

    def create(self, *, name: str) -> int:
        with translate_duplicate("Nama departemen sudah digunakan", name=name):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("INSERT INTO departments(name) VALUES(%s)", (name,))
                return int(cur.lastrowid)

    def rename(self, department_id: int, *, name: str) -> bool:
        with translate_duplicate("Nama departemen sudah digunakan", name=name):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("UPDATE departments SET name=%s WHERE id=%s", (name, department_id))
                cur.execute(
                    "UPDATE department_nik_configs SET department_name=%s WHERE department_id=%s",
                    (name, department_id),
                )
                return True

    def delete(self, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE id=%s", (department_id,))
            return cur.rowcount > 0

    def count_employees(self, department_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE department_id=%s", (department_id,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
