from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.money import total
from ..core.constants import ALLOWANCE_FIELDS


@dataclass(frozen=True)
class Salary:
    """Gaji pokok murni (tanpa tunjangan) plus lima tunjangan bernama."""

    salary_id: int
    employee_id: int
    nik: str
    basic_salary: Decimal
    position_allowance: Optional[Decimal] = None
    management_allowance: Optional[Decimal] = None
    phone_allowance: Optional[Decimal] = None
    incentive_allowance: Optional[Decimal] = None
    overtime_allowance: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def allowances(self) -> dict[str, Optional[Decimal]]:
        return {name: getattr(self, name) for name in ALLOWANCE_FIELDS}

    @property
    def total_allowances(self) -> Decimal:
        return total(self.allowances().values())

    def to_dict(self) -> dict:
        return {
            "id": self.salary_id,
            "employee_id": self.employee_id,
            "nik": self.nik,
            "basic_salary": self.basic_salary,
            **self.allowances(),
            "total_allowances": self.total_allowances,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
