from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.auth import CurrentUser
from ..core.enums import RequestStatus
from ..sick_leave.model import SickLeave
from ..sick_leave.repository import SickLeaveRepository
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_DECIDED = (RequestStatus.APPROVED, RequestStatus.REJECTED)
_STATUS_LABEL = {
    RequestStatus.PENDING: "menunggu persetujuan",
    RequestStatus.APPROVED: "disetujui",
    RequestStatus.REJECTED: "ditolak",
}


def _leave_item(req: LeaveRequest) -> dict:
    return {
        "type": "leave",
        "id": req.request_id,
        "employee_id": req.employee_id,
        "employee_name": req.employee_name,
        "status": req.status.value,
        "message": (
            f"Cuti {req.leave_type} {req.start_date.isoformat()} s/d {req.end_date.isoformat()} "
            f"{_STATUS_LABEL[req.status]}"
        ),
        "created_at": req.created_at,
    }


def _sick_item(item: SickLeave) -> dict:
    return {
        "type": "izin_sakit",
        "id": item.sick_leave_id,
        "employee_id": item.employee_id,
        "employee_name": item.employee_name,
        "status": item.status.value,
        "message": f"Pengajuan {item.jenis.value} {item.tanggal.isoformat()} {_STATUS_LABEL[item.status]}",
        "created_at": item.created_at,
    }


def _sort_key(item: dict) -> tuple:
    created: Optional[datetime] = item.get("created_at")
    return (created is not None, created or datetime.min)


class NotificationService:
    """Decided requests for the employee; pending requests for HR."""

    def __init__(self, requests: LeaveRequestRepository, sick_leaves: SickLeaveRepository):
        self._requests = requests
        self._sick_leaves = sick_leaves

    def for_user(self, user: CurrentUser) -> list[dict]:
        items: list[dict] = []
        if user.employee_id is not None:
            items += [
                _leave_item(r)
                for r in self._requests.list(employee_id=user.employee_id)
                if r.status in _DECIDED
            ]
            items += [
                _sick_item(s)
                for s in self._sick_leaves.list(employee_id=user.employee_id)
                if s.status in _DECIDED
            ]
        if user.is_hr:
            items += [_leave_item(r) for r in self._requests.list(status=RequestStatus.PENDING)]
            items += [_sick_item(s) for s in self._sick_leaves.list(status=RequestStatus.PENDING)]
        items.sort(key=_sort_key, reverse=True)
        return items
