from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import RequestStatus, SickLeaveKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, translate_duplicate
from .model import SickLeave
from .repository import SickLeaveRepository

_SELECT = """
    SELECT s.id, s.employee_id, s.tanggal, s.jenis, s.alasan, s.file_path, s.status, s.keterangan,
           s.approved_by, s.approved_at, s.rejected_by, s.rejected_at, s.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM izin_sakit s
    JOIN employees e ON e.id = s.employee_id
"""


def _row_to_sick_leave(r: dict) -> SickLeave:
    return SickLeave(
        sick_leave_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        tanggal=as_date(r["tanggal"]),
        jenis=SickLeaveKind(r["jenis"]),
        alasan=r["alasan"],
        file_path=r["file_path"],
        status=RequestStatus(r["status"]),
        keterangan=r.get("keterangan"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejected_by=r.get("rejected_by"),
        rejected_at=r.get("rejected_at"),
        created_at=r.get("created_at"),
        employee_name=(r.get("employee_name") or "").strip() or None,
    )


class MySQLSickLeaveRepository(SickLeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, *, employee_id: Optional[int] = None, status: Optional[RequestStatus] = None) -> Sequence[SickLeave]:
        where: list[str] = []
        params: list[Any] = []
        if employee_id is not None:
            where.append("s.employee_id=%s")
            params.append(employee_id)
        if status is not None:
            where.append("s.status=%s")
            params.append(status.value)
        sql = _SELECT + (" WHERE " + " AND ".join(where) if where else "") + " ORDER BY s.created_at DESC, s.id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_sick_leave(r) for r in fetchall(cur)]

    def get_by_id(self, sick_leave_id: int) -> Optional[SickLeave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE s.id=%s", (sick_leave_id,))
            row = fetchone(cur)
            return _row_to_sick_leave(row) if row else None

    def exists_for_date(self, employee_id: int, tanggal: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM izin_sakit WHERE employee_id=%s AND tanggal=%s LIMIT 1", (employee_id, tanggal))
            return fetchone(cur) is not None

    def create(self, *, employee_id: int, tanggal: date, jenis: SickLeaveKind, alasan: str, file_path: str) -> int:
        with translate_duplicate("Pengajuan izin/sakit untuk tanggal ini sudah ada", employee_id=employee_id):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO izin_sakit (employee_id, tanggal, jenis, alasan, file_path, status)
                    VALUES (%s, %s, %s, %s, %s, 'PENDING')
                    """,
                    (employee_id, tanggal, jenis.value, alasan, file_path),
                )
                return int(cur.lastrowid)

    def decide(self, sick_leave_id: int, changes: dict[str, Any]) -> bool:
        sets = ", ".join(f"{c}=%s" for c in changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE izin_sakit SET {sets} WHERE id=%s AND status='PENDING'",
                (*changes.values(), sick_leave_id),
            )
            return cur.rowcount == 1
