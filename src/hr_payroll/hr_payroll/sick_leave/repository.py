from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import RequestStatus, SickLeaveKind
from .model import SickLeave


class SickLeaveRepository(Protocol):
    def list(self, *, employee_id: Optional[int] = None, status: Optional[RequestStatus] = None) -> Sequence[SickLeave]:
        raise NotImplementedError

    def get_by_id(self, sick_leave_id: int) -> Optional[SickLeave]:
        raise NotImplementedError

    def exists_for_date(self, employee_id: int, tanggal: date) -> bool:
        raise NotImplementedError

    def create(self, *, employee_id: int, tanggal: date, jenis: SickLeaveKind, alasan: str, file_path: str) -> int:
        raise NotImplementedError

    def decide(self, sick_leave_id: int, changes: dict[str, Any]) -> bool:
        """Apply a decision only while the request is still PENDING."""

        raise NotImplementedError
