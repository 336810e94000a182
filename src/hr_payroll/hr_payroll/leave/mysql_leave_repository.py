from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, build_update, db_cursor, fetchall, fetchone, translate_duplicate
from .model import LeaveQuota, LeaveRequest
from .repository import LeaveQuotaRepository, LeaveRequestRepository

_REQUEST_SELECT = """
    SELECT lr.id, lr.employee_id, lr.leave_type, lr.start_date, lr.end_date, lr.reason, lr.status,
           lr.notes, lr.requested_date, lr.approved_by, lr.rejected_by, lr.rejected_at,
           lr.rejection_reason, lr.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM leave_requests lr
    JOIN employees e ON e.id = lr.employee_id
"""

_QUOTA_SELECT = """
    SELECT q.id, q.employee_id, q.quota_type, q.year, q.total_quota, q.used_quota,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM leave_quotas q
    JOIN employees e ON e.id = q.employee_id
"""


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        leave_type=r["leave_type"],
        start_date=as_date(r["start_date"]),
        end_date=as_date(r["end_date"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        requested_date=as_date(r["requested_date"]),
        notes=r.get("notes"),
        approved_by=r.get("approved_by"),
        rejected_by=r.get("rejected_by"),
        rejected_at=r.get("rejected_at"),
        rejection_reason=r.get("rejection_reason"),
        created_at=r.get("created_at"),
        employee_name=(r.get("employee_name") or "").strip() or None,
    )


def _row_to_quota(r: dict) -> LeaveQuota:
    return LeaveQuota(
        quota_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        quota_type=r["quota_type"],
        year=int(r["year"]),
        total_quota=int(r["total_quota"]),
        used_quota=int(r.get("used_quota") or 0),
        employee_name=(r.get("employee_name") or "").strip() or None,
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, *, employee_id: Optional[int] = None, status: Optional[RequestStatus] = None) -> Sequence[LeaveRequest]:
        where: list[str] = []
        params: list[Any] = []
        if employee_id is not None:
            where.append("lr.employee_id=%s")
            params.append(employee_id)
        if status is not None:
            where.append("lr.status=%s")
            params.append(status.value)
        sql = _REQUEST_SELECT + (" WHERE " + " AND ".join(where) if where else "") + " ORDER BY lr.created_at DESC, lr.id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_request(r) for r in fetchall(cur)]

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_REQUEST_SELECT} WHERE lr.id=%s", (request_id,))
            row = fetchone(cur)
            return _row_to_request(row) if row else None

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Sequence[RequestStatus],
    ) -> Sequence[LeaveRequest]:
        placeholders = ", ".join(["%s"] * len(statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_REQUEST_SELECT}
                WHERE lr.employee_id=%s
                  AND lr.status IN ({placeholders})
                  AND lr.start_date <= %s
                  AND lr.end_date >= %s
                """,
                (employee_id, *[s.value for s in statuses], end_date, start_date),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        employee_id: int,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str,
        requested_date: date,
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests
                    (employee_id, leave_type, start_date, end_date, reason, status, requested_date, notes)
                VALUES (%s, %s, %s, %s, %s, 'PENDING', %s, %s)
                """,
                (employee_id, leave_type, start_date, end_date, reason, requested_date, notes),
            )
            return int(cur.lastrowid)

    def update(self, request_id: int, changes: dict[str, Any]) -> bool:
        if not changes:
            return True
        sql, params = build_update("leave_requests", "id", request_id, changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return True

    def approve(
        self,
        request_id: int,
        *,
        changes: dict[str, Any],
        quota_year: Optional[int],
        quota_type: str,
        quota_days: int,
    ) -> bool:
        sets = ", ".join(["status='APPROVED'"] + [f"{c}=%s" for c in changes])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE leave_requests SET {sets} WHERE id=%s AND status<>'APPROVED'",
                (*changes.values(), request_id),
            )
            if cur.rowcount != 1:
                return False
            if quota_year is not None and quota_days > 0:
                cur.execute(
                    """
                    UPDATE leave_quotas
                    SET used_quota = used_quota + %s
                    WHERE employee_id = (SELECT employee_id FROM leave_requests WHERE id=%s)
                      AND year=%s AND quota_type=%s
                    """,
                    (quota_days, request_id, quota_year, quota_type),
                )
            return True

    def delete(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE id=%s", (request_id,))
            return cur.rowcount > 0


class MySQLLeaveQuotaRepository(LeaveQuotaRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        year: Optional[int] = None,
        quota_type: Optional[str] = None,
    ) -> Sequence[LeaveQuota]:
        where: list[str] = []
        params: list[Any] = []
        for col, value in (("q.employee_id", employee_id), ("q.year", year), ("q.quota_type", quota_type)):
            if value is not None:
                where.append(f"{col}=%s")
                params.append(value)
        sql = _QUOTA_SELECT + (" WHERE " + " AND ".join(where) if where else "") + " ORDER BY q.year DESC, e.first_name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_quota(r) for r in fetchall(cur)]

    def get_by_id(self, quota_id: int) -> Optional[LeaveQuota]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_QUOTA_SELECT} WHERE q.id=%s", (quota_id,))
            row = fetchone(cur)
            return _row_to_quota(row) if row else None

    def find(self, *, employee_id: int, year: int, quota_type: str) -> Optional[LeaveQuota]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_QUOTA_SELECT} WHERE q.employee_id=%s AND q.year=%s AND q.quota_type=%s",
                (employee_id, year, quota_type),
            )
            row = fetchone(cur)
            return _row_to_quota(row) if row else None

    def create(self, *, employee_id: int, year: int, quota_type: str, total_quota: int, used_quota: int) -> int:
        with translate_duplicate("Kuota cuti untuk karyawan/tahun/jenis ini sudah ada", employee_id=employee_id, year=year):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO leave_quotas (employee_id, year, quota_type, total_quota, used_quota)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (employee_id, year, quota_type, total_quota, used_quota),
                )
                return int(cur.lastrowid)

    def update(self, quota_id: int, changes: dict[str, Any]) -> bool:
        if not changes:
            return True
        sql, params = build_update("leave_quotas", "id", quota_id, changes)
        with translate_duplicate("Kuota cuti untuk karyawan/tahun/jenis ini sudah ada", id=quota_id):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, params)
                return True

    def delete(self, quota_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_quotas WHERE id=%s", (quota_id,))
            return cur.rowcount > 0
