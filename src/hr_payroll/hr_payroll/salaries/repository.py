from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Protocol, Sequence

from .model import Salary


class SalaryRepository(Protocol):
    def list_all(self) -> Sequence[dict]:
        """Salary rows joined with the employee name."""

        raise NotImplementedError

    def get_by_id(self, salary_id: int) -> Optional[Salary]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: int) -> Optional[Salary]:
        raise NotImplementedError

    def get_by_nik(self, nik: str) -> Optional[Salary]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        nik: str,
        basic_salary: Decimal,
        allowances: dict[str, Optional[Decimal]],
    ) -> int:
        raise NotImplementedError

    def update(self, salary_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, salary_id: int) -> bool:
        raise NotImplementedError
