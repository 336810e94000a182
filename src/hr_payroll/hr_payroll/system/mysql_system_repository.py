from __future__ import annotations

from typing import Dict, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SystemSetting
from .repository import SystemRepository

_COUNTED_TABLES = ("employees", "departments")


class MySQLSystemRepository(SystemRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def ping(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS ok")
            fetchone(cur)

    def table_counts(self) -> Dict[str, int]:
        out: Dict[str, int] = {}
        with db_cursor(self._conn_factory) as (_, cur):
            for table in _COUNTED_TABLES:
                cur.execute(f"SELECT COUNT(*) AS n FROM {table}")
                row = fetchone(cur)
                out[table] = int(row["n"]) if row else 0
        return out

    def list_settings(self) -> Sequence[SystemSetting]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, setting_key, setting_value, setting_type, description, updated_by, updated_at
                FROM system_settings
                ORDER BY setting_key
                """
            )
            return [
                SystemSetting(
                    setting_id=int(r["id"]),
                    key=r["setting_key"],
                    value=r.get("setting_value"),
                    setting_type=r.get("setting_type") or "string",
                    description=r.get("description"),
                    updated_by=r.get("updated_by"),
                    updated_at=r.get("updated_at"),
                )
                for r in fetchall(cur)
            ]
