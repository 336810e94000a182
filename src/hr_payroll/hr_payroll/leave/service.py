from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence

from ..common.auth import CurrentUser
from ..common.datetime_utils import parse_date_field, today_in
from ..common.validators import optional_int, optional_str, require_int, require_non_empty
from ..core.constants import ANNUAL_LEAVE_TYPE, BUSINESS_TIMEZONE, SICK_REASON
from ..core.enums import RequestStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import LeaveQuota, LeaveRequest
from .repository import LeaveQuotaRepository, LeaveRequestRepository

logger = logging.getLogger(__name__)

BLOCKING_STATUSES = (RequestStatus.PENDING, RequestStatus.APPROVED)


def parse_request_status(value: Any) -> RequestStatus:
    try:
        return RequestStatus(str(value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in RequestStatus)
        raise ValidationError(f"Status harus salah satu dari: {allowed}", details={"field": "status"})


def is_annual(leave_type: str) -> bool:
    return (leave_type or "").strip().lower() == ANNUAL_LEAVE_TYPE


class LeaveService:
    """Use cases: leave requests (create with overlap/quota checks, decide)."""

    def __init__(
        self,
        requests: LeaveRequestRepository,
        quotas: LeaveQuotaRepository,
        employees: EmployeeRepository,
        *,
        timezone: str = BUSINESS_TIMEZONE,
        today: Optional[Callable[[], date]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._requests = requests
        self._quotas = quotas
        self._employees = employees
        self._today = today or (lambda: today_in(timezone))
        self._now = now or datetime.now

    def _resolve_employee(self, payload: dict, user: CurrentUser) -> int:
        requested = optional_int(payload.get("employee_id"), "Karyawan")
        if requested is not None and (user.is_hr or requested == user.employee_id):
            return requested
        if requested is not None:
            raise AuthorizationError("Anda hanya dapat mengajukan cuti untuk diri sendiri")
        if user.employee_id is None:
            raise ValidationError("employee_id wajib diisi", details={"field": "employee_id"})
        return user.employee_id

    def create(self, payload: dict, *, user: CurrentUser) -> LeaveRequest:
        employee_id = self._resolve_employee(payload, user)
        leave_type = require_non_empty(payload.get("leave_type"), "Jenis cuti")
        reason = require_non_empty(payload.get("reason"), "Alasan")
        start = parse_date_field(payload.get("start_date"), "Tanggal mulai")
        end = parse_date_field(payload.get("end_date"), "Tanggal selesai")

        if start > end:
            raise ValidationError("Tanggal mulai tidak boleh setelah tanggal selesai", details={"field": "start_date"})
        today = self._today()
        if start < today:
            raise ValidationError(
                "Tanggal mulai tidak boleh sebelum hari ini",
                details={"field": "start_date", "today": today.isoformat()},
            )
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Karyawan tidak ditemukan", details={"employee_id": employee_id})

        overlapping = self._requests.find_overlapping(
            employee_id=employee_id, start_date=start, end_date=end, statuses=BLOCKING_STATUSES
        )
        if overlapping:
            first = overlapping[0]
            raise ConflictError(
                "Sudah ada pengajuan cuti pada rentang tanggal tersebut",
                details={
                    "conflicting_request_id": first.request_id,
                    "start_date": first.start_date.isoformat(),
                    "end_date": first.end_date.isoformat(),
                    "status": first.status.value,
                },
            )

        days = (end - start).days + 1
        if is_annual(leave_type):
            quota = self._quotas.find(employee_id=employee_id, year=start.year, quota_type=ANNUAL_LEAVE_TYPE)
            if quota and quota.remaining < days:
                raise ValidationError(
                    "Sisa kuota cuti tahunan tidak mencukupi",
                    details={"remaining": quota.remaining, "requested_days": days},
                )

        new_id = self._requests.create(
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            reason=reason,
            requested_date=today,
            notes=optional_str(payload.get("notes")),
        )
        return self.get(new_id)

    def get(self, request_id: int) -> LeaveRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Pengajuan cuti tidak ditemukan", details={"id": request_id})
        return req

    def list_requests(self, *, employee_id: Any = None, status: Any = None) -> Sequence[LeaveRequest]:
        return self._requests.list(
            employee_id=optional_int(employee_id, "Karyawan"),
            status=parse_request_status(status) if status else None,
        )

    def decide(self, request_id: int, payload: dict, *, user: CurrentUser) -> LeaveRequest:
        """Update a request; approval increments the annual quota at most once."""
        current = self.get(request_id)
        changes: dict[str, Any] = {}
        for key in ("notes", "rejection_reason"):
            if key in payload:
                changes[key] = optional_str(payload[key])

        status = parse_request_status(payload["status"]) if payload.get("status") else None

        if status == RequestStatus.APPROVED:
            changes["approved_by"] = optional_int(payload.get("approved_by"), "approved_by") or user.user_id
            counts_quota = (current.reason or "").strip() != SICK_REASON
            transitioned = self._requests.approve(
                current.request_id,
                changes=changes,
                quota_year=current.start_date.year if counts_quota else None,
                quota_type=ANNUAL_LEAVE_TYPE,
                quota_days=current.days,
            )
            if transitioned:
                logger.info(
                    "Leave %s approved by %s (quota +%d)",
                    current.request_id, changes["approved_by"], current.days if counts_quota else 0,
                )
            else:
                # Already approved: only the note fields may still change.
                changes.pop("approved_by")
                self._requests.update(current.request_id, changes)
            return self.get(current.request_id)

        if status == RequestStatus.REJECTED:
            changes["status"] = status.value
            changes["rejected_by"] = optional_int(payload.get("rejected_by"), "rejected_by") or user.user_id
            changes["rejected_at"] = self._now()
        elif status is not None:
            changes["status"] = status.value

        self._requests.update(current.request_id, changes)
        return self.get(current.request_id)

    def delete(self, request_id: int) -> None:
        req = self.get(request_id)
        self._requests.delete(req.request_id)


class LeaveQuotaService:
    def __init__(self, quotas: LeaveQuotaRepository, employees: EmployeeRepository):
        self._quotas = quotas
        self._employees = employees

    @staticmethod
    def _non_negative(value: Any, field_name: str) -> int:
        number = require_int(value, field_name)
        if number < 0:
            raise ValidationError(f"{field_name} tidak boleh negatif", details={"field": field_name})
        return number

    def list_quotas(self, *, employee_id: Any = None, year: Any = None, quota_type: Any = None) -> Sequence[LeaveQuota]:
        return self._quotas.list(
            employee_id=optional_int(employee_id, "Karyawan"),
            year=optional_int(year, "Tahun"),
            quota_type=optional_str(quota_type),
        )

    def my_quotas(self, employee_id: Optional[int], *, year: Any = None) -> Sequence[LeaveQuota]:
        if employee_id is None:
            raise NotFoundError("Data karyawan untuk user ini tidak ditemukan")
        return self._quotas.list(employee_id=int(employee_id), year=optional_int(year, "Tahun"))

    def get(self, quota_id: int) -> LeaveQuota:
        quota = self._quotas.get_by_id(int(quota_id))
        if not quota:
            raise NotFoundError("Kuota cuti tidak ditemukan", details={"id": quota_id})
        return quota

    def create(self, payload: dict) -> LeaveQuota:
        employee_id = require_int(payload.get("employee_id"), "Karyawan")
        year = require_int(payload.get("year"), "Tahun")
        quota_type = optional_str(payload.get("quota_type")) or ANNUAL_LEAVE_TYPE
        total_quota = self._non_negative(payload.get("total_quota"), "total_quota")
        used_quota = self._non_negative(payload.get("used_quota", 0), "used_quota")

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Karyawan tidak ditemukan", details={"employee_id": employee_id})
        if self._quotas.find(employee_id=employee_id, year=year, quota_type=quota_type):
            raise ConflictError(
                "Kuota cuti untuk karyawan/tahun/jenis ini sudah ada",
                details={"employee_id": employee_id, "year": year, "quota_type": quota_type},
            )
        new_id = self._quotas.create(
            employee_id=employee_id, year=year, quota_type=quota_type, total_quota=total_quota, used_quota=used_quota
        )
        return self.get(new_id)

    def update(self, quota_id: int, payload: dict) -> LeaveQuota:
        quota = self.get(quota_id)
        changes: dict[str, Any] = {}
        for key in ("total_quota", "used_quota"):
            if key in payload:
                changes[key] = self._non_negative(payload[key], key)
        if "year" in payload:
            changes["year"] = require_int(payload["year"], "Tahun")
        if "quota_type" in payload:
            changes["quota_type"] = require_non_empty(payload["quota_type"], "Jenis kuota")
        self._quotas.update(quota.quota_id, changes)
        return self.get(quota.quota_id)

    def delete(self, quota_id: int) -> None:
        quota = self.get(quota_id)
        self._quotas.delete(quota.quota_id)
