from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, translate_duplicate
from .model import User
from .repository import UserRepository

_COLUMNS = "id, username, email, role, password_hash, employee_id, last_login, created_at"


def _row_to_user(r: dict) -> User:
    return User(
        user_id=int(r["id"]),
        username=r["username"],
        email=r["email"],
        role=Role(r["role"]),
        password_hash=r.get("password_hash"),
        employee_id=r.get("employee_id"),
        last_login=r.get("last_login"),
        created_at=r.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY id DESC")
            return [_row_to_user(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create(self, *, username: str, email: str, password_hash: str, role: Role) -> int:
        with translate_duplicate("Email atau username sudah terdaftar", email=email, username=username):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users(username, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                    (username, email, password_hash, role.value),
                )
                return int(cur.lastrowid)

    def update(self, user_id: int, changes: Dict[str, Any]) -> bool:
        sql, params = build_update("users", "id", user_id, changes)
        with translate_duplicate("Email atau username sudah terdaftar", user_id=user_id):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)
                return cur.rowcount > 0

    def touch_last_login(self, user_id: int, *, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login=%s WHERE id=%s", (at, user_id))

    def delete(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (user_id,))
            return cur.rowcount > 0
