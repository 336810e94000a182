from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from ...common.money import ZERO, percent_of, round_currency, total
from ...core.enums import ComponentType
from ...salaries.model import Salary
from ..model import CalculatedComponent, ManualDeductions, PayrollBreakdown, PayrollComponent, PayrollTotals
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: percentage of pure basic salary, else flat amount, else 0.

    Every component amount is rounded half-up to 2 places before summing, so
    all totals are exact sums of rounded values and
    ``net_salary == total_pendapatan - total_deduction`` holds exactly.
    """

    def component_amount(self, component: PayrollComponent, basic_salary: Decimal) -> Decimal:
        if component.percentage > 0:
            return percent_of(basic_salary, component.percentage)
        if component.amount > 0:
            return round_currency(component.amount)
        return ZERO

    def calculate(
        self,
        *,
        salary: Salary,
        components: Iterable[PayrollComponent],
        manual: ManualDeductions,
        basic_salary_input: Optional[Decimal] = None,
    ) -> PayrollBreakdown:
        pure_basic = round_currency(salary.basic_salary)

        calculated: list[CalculatedComponent] = []
        income: list[Decimal] = []
        deductions: list[Decimal] = []
        for comp in components:
            if not comp.is_active:
                continue
            amount = self.component_amount(comp, pure_basic)
            calculated.append(
                CalculatedComponent(
                    name=comp.name,
                    type=comp.type,
                    category=comp.category,
                    percentage=comp.percentage,
                    amount=amount,
                    is_percentage=comp.is_percentage,
                )
            )
            (income if comp.type == ComponentType.INCOME else deductions).append(amount)

        total_income = total(income)
        total_auto_deduction = total(deductions)

        allowances = {name: round_currency(v) if v is not None else ZERO for name, v in salary.allowances().items()}
        total_allowances = total(allowances.values())

        pendapatan_tetap = pure_basic + total_income
        pendapatan_tidak_tetap = total_allowances
        total_pendapatan = pendapatan_tetap + pendapatan_tidak_tetap

        total_manual = total((manual.kasbon, manual.telat, manual.angsuran_kredit))
        total_deduction = total_auto_deduction + total_manual

        if basic_salary_input is None:
            basic_salary_input = pure_basic + total_allowances

        totals = PayrollTotals(
            basic_salary=round_currency(basic_salary_input),
            total_income=total_income,
            total_auto_deduction=total_auto_deduction,
            total_manual_deduction=total_manual,
            total_deduction=total_deduction,
            net_salary=total_pendapatan - total_deduction,
            pendapatan_tetap=pendapatan_tetap,
            pendapatan_tidak_tetap=pendapatan_tidak_tetap,
            total_pendapatan=total_pendapatan,
        )
        return PayrollBreakdown(
            calculated_components=calculated,
            totals=totals,
            pure_basic_salary=pure_basic,
            allowances=allowances,
            manual_deductions=manual,
        )
