from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import Employee, NewEmployee


class EmployeeRepository(Protocol):
    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(self, data: NewEmployee) -> int:
        """Insert; a unique violation raises ConflictError with ``details['field']`` = 'nik' or 'email'."""

        raise NotImplementedError

    def update(self, employee_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_cascade(self, employee_id: int) -> bool:
        """Delete the employee together with leave, attendance, sick, payroll, quota and salary rows."""

        raise NotImplementedError
