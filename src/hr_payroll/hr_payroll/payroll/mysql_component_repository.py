from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.money import ZERO
from ..core.enums import ComponentCategory, ComponentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, build_update, db_cursor, fetchall, fetchone, translate_duplicate
from .component_repository import PayrollComponentRepository
from .model import PayrollComponent

_SELECT = """
    SELECT id, name, type, category, percentage, amount, is_active, description, created_at, updated_at
    FROM payroll_components
"""


def _row_to_component(r: dict) -> PayrollComponent:
    return PayrollComponent(
        component_id=int(r["id"]),
        name=r["name"],
        type=ComponentType(r["type"]),
        category=ComponentCategory(r["category"]),
        percentage=as_decimal(r.get("percentage")) or ZERO,
        amount=as_decimal(r.get("amount")) or ZERO,
        is_active=bool(r.get("is_active", True)),
        description=r.get("description"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPayrollComponentRepository(PayrollComponentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[PayrollComponent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY type, category, name")
            return [_row_to_component(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[PayrollComponent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE is_active=1 ORDER BY type, category, name")
            return [_row_to_component(r) for r in fetchall(cur)]

    def get_by_id(self, component_id: int) -> Optional[PayrollComponent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s", (component_id,))
            row = fetchone(cur)
            return _row_to_component(row) if row else None

    def create(self, fields: dict[str, Any]) -> int:
        cols = list(fields)
        with translate_duplicate("Nama komponen sudah digunakan", name=fields.get("name")):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO payroll_components ({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                    tuple(fields[c] for c in cols),
                )
                return int(cur.lastrowid)

    def update(self, component_id: int, changes: dict[str, Any]) -> bool:
        if not changes:
            return True
        sql, params = build_update("payroll_components", "id", component_id, changes)
        with translate_duplicate("Nama komponen sudah digunakan", id=component_id):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)
                return True

    def delete(self, component_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_components WHERE id=%s", (component_id,))
            return cur.rowcount > 0

    def toggle(self, component_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE payroll_components SET is_active = NOT is_active WHERE id=%s", (component_id,))
            return cur.rowcount > 0
