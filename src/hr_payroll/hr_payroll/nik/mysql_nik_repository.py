from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, translate_duplicate
from .model import DepartmentNikConfig
from .repository import NikConfigRepository

_COLUMNS = """
    id, department_id, department_name, prefix, current_sequence, sequence_length,
    format_pattern, is_active, created_at, updated_at
"""


def _row_to_config(r: dict) -> DepartmentNikConfig:
    return DepartmentNikConfig(
        config_id=int(r["id"]),
        department_id=int(r["department_id"]),
        department_name=r["department_name"],
        prefix=r["prefix"],
        current_sequence=int(r["current_sequence"]),
        sequence_length=int(r["sequence_length"]),
        format_pattern=r.get("format_pattern"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLNikConfigRepository(NikConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, params: tuple) -> Optional[DepartmentNikConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM department_nik_configs WHERE {where} LIMIT 1", params)
            row = fetchone(cur)
            return _row_to_config(row) if row else None

    def list_all(self) -> Sequence[DepartmentNikConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM department_nik_configs ORDER BY department_name")
            return [_row_to_config(r) for r in fetchall(cur)]

    def get_by_id(self, config_id: int) -> Optional[DepartmentNikConfig]:
        return self._one("id=%s", (config_id,))

    def get_by_department_id(self, department_id: int) -> Optional[DepartmentNikConfig]:
        return self._one("department_id=%s", (department_id,))

    def get_active_by_department_id(self, department_id: int) -> Optional[DepartmentNikConfig]:
        return self._one("department_id=%s AND is_active=1", (department_id,))

    def get_active_by_department_name(self, department_name: str) -> Optional[DepartmentNikConfig]:
        return self._one("LOWER(department_name)=LOWER(%s) AND is_active=1", (department_name,))

    def create(
        self,
        *,
        department_id: int,
        department_name: str,
        prefix: str,
        current_sequence: int,
        sequence_length: int,
        format_pattern: Optional[str],
        is_active: bool,
    ) -> int:
        with translate_duplicate("Konfigurasi NIK untuk departemen ini sudah ada", department_id=department_id):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO department_nik_configs
                        (department_id, department_name, prefix, current_sequence, sequence_length, format_pattern, is_active)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    """,
                    (department_id, department_name, prefix, current_sequence, sequence_length, format_pattern, int(is_active)),
                )
                return int(cur.lastrowid)

    def update(self, config_id: int, changes: dict[str, Any]) -> bool:
        if not changes:
            return True
        sql, params = build_update("department_nik_configs", "id", config_id, changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return cur.rowcount >= 0

    def delete(self, config_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM department_nik_configs WHERE id=%s", (config_id,))
            return cur.rowcount > 0

    def reserve_next(self, config_id: int) -> Optional[DepartmentNikConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM department_nik_configs WHERE id=%s AND is_active=1 FOR UPDATE",
                (config_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(
                "UPDATE department_nik_configs SET current_sequence = current_sequence + 1 WHERE id=%s",
                (config_id,),
            )
            return _row_to_config(row)

    def count_employees_with_nik(self, department_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM employees WHERE department_id=%s AND nik IS NOT NULL",
                (department_id,),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0
