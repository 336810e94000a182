from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveQuota, LeaveRequest


class LeaveRequestRepository(Protocol):
    def list(self, *, employee_id: Optional[int] = None, status: Optional[RequestStatus] = None) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Sequence[RequestStatus],
    ) -> Sequence[LeaveRequest]:
        """Requests of the employee in ``statuses`` whose inclusive range intersects [start_date, end_date]."""

        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, request_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def approve(
        self,
        request_id: int,
        *,
        changes: dict[str, Any],
        quota_year: Optional[int],
        quota_type: str,
        quota_days: int,
    ) -> bool:
        """Move to APPROVED only if not already APPROVED; in the same transaction
        add ``quota_days`` to the matching quota when ``quota_year`` is given.

        Returns True when this call performed the transition.
        """

        raise NotImplementedError

    def delete(self, request_id: int) -> bool:
        raise NotImplementedError


class LeaveQuotaRepository(Protocol):
    def list(
        self,
        *,
        employee_id: Optional[int] = None,
        year: Optional[int] = None,
        quota_type: Optional[str] = None,
    ) -> Sequence[LeaveQuota]:
        raise NotImplementedError

    def get_by_id(self, quota_id: int) -> Optional[LeaveQuota]:
        raise NotImplementedError

    def find(self, *, employee_id: int, year: int, quota_type: str) -> Optional[LeaveQuota]:
        raise NotImplementedError

    def create(self, *, employee_id: int, year: int, quota_type: str, total_quota: int, used_quota: int) -> int:
        raise NotImplementedError

    def update(self, quota_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, quota_id: int) -> bool:
        raise NotImplementedError
