from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection = one transaction: commit on success, rollback on any error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(err: Exception) -> bool:
    return isinstance(err, mysql.connector.IntegrityError) and getattr(err, "errno", None) == errorcode.ER_DUP_ENTRY


@contextmanager
def translate_duplicate(message: str, **details: Any):
    """Turn a MySQL duplicate-key error (1062) into :class:`ConflictError`."""
    try:
        yield
    except mysql.connector.IntegrityError as e:
        if is_duplicate_key(e):
            raise ConflictError(message, details=details) from e
        raise


def as_decimal(value: Any) -> Optional[Decimal]:
    """DECIMAL columns come back as Decimal from the C and pure connectors alike; be lenient."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def build_update(table: str, key_col: str, key: Any, changes: Dict[str, Any]) -> tuple[str, tuple]:
    """Build ``UPDATE table SET a=%s, b=%s WHERE key_col=%s`` from a whitelisted dict."""
    cols = ", ".join(f"{c}=%s" for c in changes)
    params = tuple(changes.values()) + (key,)
    return f"UPDATE {table} SET {cols} WHERE {key_col}=%s", params
