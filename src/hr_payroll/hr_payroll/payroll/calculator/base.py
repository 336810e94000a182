from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, Optional

from ...salaries.model import Salary
from ..model import ManualDeductions, PayrollBreakdown, PayrollComponent


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def component_amount(self, component: PayrollComponent, basic_salary: Decimal) -> Decimal:
        """Contribution of one component for the given pure basic salary."""
        raise NotImplementedError

    @abstractmethod
    def calculate(
        self,
        *,
        salary: Salary,
        components: Iterable[PayrollComponent],
        manual: ManualDeductions,
        basic_salary_input: Optional[Decimal] = None,
    ) -> PayrollBreakdown:
        raise NotImplementedError
