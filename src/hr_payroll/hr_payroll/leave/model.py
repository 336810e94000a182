from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import inclusive_days
from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    requested_date: date
    notes: Optional[str] = None
    approved_by: Optional[int] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None

    @property
    def days(self) -> int:
        return inclusive_days(self.start_date, self.end_date)

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and start <= self.end_date

    def to_dict(self) -> dict:
        data = asdict(self)
        data["id"] = data.pop("request_id")
        data["status"] = self.status.value
        data["days"] = self.days
        return data


@dataclass(frozen=True)
class LeaveQuota:
    quota_id: int
    employee_id: int
    quota_type: str
    year: int
    total_quota: int
    used_quota: int = 0
    employee_name: Optional[str] = None

    @property
    def remaining(self) -> int:
        return self.total_quota - self.used_quota

    def to_dict(self) -> dict:
        data = asdict(self)
        data["id"] = data.pop("quota_id")
        data["remaining_quota"] = self.remaining
        return data
