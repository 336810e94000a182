from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import Payroll


class PayrollRepository(Protocol):
    """Antarmuka repository untuk Payroll (slip gaji tersimpan)."""

    def list(self, *, employee_id: Optional[int] = None, status: Optional[PayrollStatus] = None) -> Sequence[Payroll]:
        raise NotImplementedError

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def exists_for_month(self, employee_id: int, year: int, month: int, *, exclude_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def create(self, fields: dict[str, Any]) -> int:
        """Insert; a second row for the same employee and month raises ConflictError."""

        raise NotImplementedError

    def update(self, payroll_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        raise NotImplementedError
