from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import parse_date_field
from ..common.money import ZERO, round_currency, total
from ..common.validators import parse_optional_amount, require_int, require_non_negative
from ..core.constants import (
    ALLOWANCE_FIELDS,
    COMPANY_BPJS_COMPONENTS,
    EMPLOYEE_BPJS_COMPONENTS,
    MANUAL_DEDUCTION_FIELDS,
)
from ..core.enums import ComponentType, PayrollStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..salaries.model import Salary
from ..salaries.repository import SalaryRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .component_repository import PayrollComponentRepository
from .model import PAYROLL_AMOUNT_FIELDS, ManualDeductions, Payroll, PayrollBreakdown, PayrollComponent
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def _amount(payload: dict, key: str) -> Optional[Decimal]:
    value = require_non_negative(parse_optional_amount(payload.get(key), key), key)
    return round_currency(value) if value is not None else None


def _present(value: Optional[Decimal]) -> bool:
    return value is not None and value != 0


def parse_manual_deductions(payload: Optional[dict]) -> ManualDeductions:
    payload = payload or {}
    if not isinstance(payload, dict):
        raise ValidationError("manual_deductions harus berupa objek", details={"field": "manual_deductions"})
    return ManualDeductions(**{k: _amount(payload, k) or ZERO for k in MANUAL_DEDUCTION_FIELDS})


def parse_status(value: Any) -> PayrollStatus:
    try:
        return PayrollStatus(str(value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in PayrollStatus)
        raise ValidationError(f"Status harus salah satu dari: {allowed}", details={"field": "status", "value": value})


class PayrollService:
    """Use cases: payroll calculation and payroll records.

    ``calculate`` is read-only. ``create`` re-derives every absent or zero
    sub-amount with the same calculator so both paths agree.
    """

    def __init__(
        self,
        payrolls: PayrollRepository,
        components: PayrollComponentRepository,
        salaries: SalaryRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._payrolls = payrolls
        self._components = components
        self._salaries = salaries
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._now = now or datetime.now

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Karyawan tidak ditemukan", details={"employee_id": employee_id})

    def _require_salary(self, employee_id: int) -> Salary:
        salary = self._salaries.get_by_employee_id(employee_id)
        if not salary:
            raise NotFoundError(
                "Data gaji karyawan tidak ditemukan",
                details={"employee_id": employee_id, "reason": "salary_not_found"},
            )
        return salary

    # Calculation

    def calculate(
        self,
        *,
        employee_id: Any,
        basic_salary_input: Any = None,
        manual_deductions: Optional[dict] = None,
    ) -> PayrollBreakdown:
        """Breakdown for one employee.

        ``basic_salary_input`` is the caller's base-plus-allowances figure; it is
        validated and echoed in ``totals.basic_salary`` only. All arithmetic
        uses the pure basic salary from the Salary row.
        """
        employee_id = require_int(employee_id, "Karyawan")
        basic_input = require_non_negative(parse_optional_amount(basic_salary_input, "basic_salary"), "basic_salary")
        manual = parse_manual_deductions(manual_deductions)

        self._require_employee(employee_id)
        salary = self._require_salary(employee_id)
        return self._calculator.calculate(
            salary=salary,
            components=self._components.list_active(),
            manual=manual,
            basic_salary_input=basic_input,
        )

    # Records

    def list_payrolls(self, *, employee_id: Any = None, status: Any = None) -> Sequence[Payroll]:
        return self._payrolls.list(
            employee_id=require_int(employee_id, "Karyawan") if employee_id not in (None, "") else None,
            status=parse_status(status) if status else None,
        )

    def get(self, payroll_id: int, *, employee_scope: Optional[int] = None) -> Payroll:
        """``employee_scope`` restricts access to one employee's own payrolls."""
        payroll = self._payrolls.get_by_id(int(payroll_id))
        if not payroll:
            raise NotFoundError("Payroll tidak ditemukan", details={"id": payroll_id})
        if employee_scope is not None and payroll.employee_id != int(employee_scope):
            raise AuthorizationError("Anda hanya dapat melihat payroll milik sendiri")
        return payroll

    def _ensure_month_free(self, employee_id: int, payment_date, *, exclude_id: Optional[int] = None) -> None:
        if self._payrolls.exists_for_month(employee_id, payment_date.year, payment_date.month, exclude_id=exclude_id):
            logger.info(
                "Duplicate payroll rejected for employee %s in %04d-%02d",
                employee_id, payment_date.year, payment_date.month,
            )
            raise ConflictError(
                "Payroll untuk karyawan ini pada bulan tersebut sudah ada",
                details={"employee_id": employee_id, "month": f"{payment_date.year:04d}-{payment_date.month:02d}"},
            )

    def _named_fallback(
        self,
        given: dict[str, Optional[Decimal]],
        names: dict[str, str],
        by_name: dict[str, PayrollComponent],
        basic: Decimal,
    ) -> dict[str, Decimal]:
        out: dict[str, Decimal] = {}
        for field_name, comp_name in names.items():
            value = given.get(field_name)
            if not _present(value):
                comp = by_name.get(comp_name)
                value = self._calculator.component_amount(comp, basic) if comp else ZERO
            out[field_name] = value
        return out

    def _other_components(self, active: Sequence[PayrollComponent], ctype: ComponentType, named: set[str], basic: Decimal) -> Decimal:
        return total(
            self._calculator.component_amount(c, basic)
            for c in active
            if c.type == ctype and c.name not in named
        )

    def create(self, payload: dict, *, created_by: Optional[int] = None) -> Payroll:
        employee_id = require_int(payload.get("employee_id"), "Karyawan")
        period_start = parse_date_field(payload.get("pay_period_start"), "pay_period_start")
        period_end = parse_date_field(payload.get("pay_period_end"), "pay_period_end")
        payment_date = parse_date_field(payload.get("payment_date"), "payment_date")
        if period_end < period_start:
            raise ValidationError("pay_period_end tidak boleh sebelum pay_period_start", details={"field": "pay_period_end"})
        status = parse_status(payload.get("status")) if payload.get("status") else PayrollStatus.PENDING
        given = {k: _amount(payload, k) for k in PAYROLL_AMOUNT_FIELDS}

        self._require_employee(employee_id)
        self._ensure_month_free(employee_id, payment_date)

        salary = self._salaries.get_by_employee_id(employee_id)
        basic = given["basic_salary"]
        if not _present(basic):
            basic = round_currency(self._require_salary(employee_id).basic_salary)

        allowances: dict[str, Decimal] = {}
        for name in ALLOWANCE_FIELDS:
            value = given[name]
            if value is None and salary is not None:
                stored = salary.allowances()[name]
                value = round_currency(stored) if stored is not None else None
            allowances[name] = value or ZERO
        total_allowances = given["total_allowances"] if _present(given["total_allowances"]) else total(allowances.values())

        active = list(self._components.list_active())
        # Named fields only take components of their own type.
        income_by_name = {c.name: c for c in active if c.type == ComponentType.INCOME}
        deduction_by_name = {c.name: c for c in active if c.type == ComponentType.DEDUCTION}
        company = self._named_fallback(given, COMPANY_BPJS_COMPONENTS, income_by_name, basic)
        employee_side = self._named_fallback(given, EMPLOYEE_BPJS_COMPONENTS, deduction_by_name, basic)

        subtotal_company = given["subtotal_company"]
        if not _present(subtotal_company):
            subtotal_company = total(company.values()) + self._other_components(
                active, ComponentType.INCOME, set(COMPANY_BPJS_COMPONENTS.values()), basic
            )
        subtotal_employee = given["subtotal_employee"]
        if not _present(subtotal_employee):
            subtotal_employee = total(employee_side.values()) + self._other_components(
                active, ComponentType.DEDUCTION, set(EMPLOYEE_BPJS_COMPONENTS.values()), basic
            )

        manual = {k: given[k] or ZERO for k in MANUAL_DEDUCTION_FIELDS}
        total_pendapatan = given["total_pendapatan"]
        if not _present(total_pendapatan):
            total_pendapatan = basic + total_allowances + subtotal_company
        total_deductions = given["total_deductions"]
        if not _present(total_deductions):
            total_deductions = subtotal_employee + total(manual.values())
        gross_salary = given["gross_salary"] if _present(given["gross_salary"]) else total_pendapatan
        net_salary = given["net_salary"] if _present(given["net_salary"]) else total_pendapatan - total_deductions

        fields: dict[str, Any] = {
            "employee_id": employee_id,
            "pay_period_start": period_start,
            "pay_period_end": period_end,
            "payment_date": payment_date,
            "basic_salary": basic,
            "gross_salary": gross_salary,
            **allowances,
            "total_allowances": total_allowances,
            **company,
            "subtotal_company": subtotal_company,
            **employee_side,
            "subtotal_employee": subtotal_employee,
            **manual,
            "total_deductions": total_deductions,
            "total_pendapatan": total_pendapatan,
            "net_salary": net_salary,
            "status": status.value,
            "created_by": created_by,
        }
        new_id = self._payrolls.create(fields)
        logger.info("Payroll %s created for employee %s (net %s)", new_id, employee_id, net_salary)
        return self.get(new_id)

    def update(self, payroll_id: int, payload: dict) -> Payroll:
        current = self.get(payroll_id)
        changes: dict[str, Any] = {}
        for key in PAYROLL_AMOUNT_FIELDS:
            if key in payload:
                changes[key] = _amount(payload, key) or ZERO
        for key in ("pay_period_start", "pay_period_end", "payment_date"):
            if key in payload:
                changes[key] = parse_date_field(payload[key], key)
        if "payment_date" in changes:
            self._ensure_month_free(current.employee_id, changes["payment_date"], exclude_id=current.payroll_id)
        if "status" in payload:
            changes["status"] = parse_status(payload["status"]).value
        self._payrolls.update(current.payroll_id, changes)
        return self.get(current.payroll_id)

    def update_status(self, payroll_id: int, status: Any, *, user_id: Optional[int] = None) -> Payroll:
        new_status = parse_status(status)
        current = self.get(payroll_id)
        changes: dict[str, Any] = {"status": new_status.value}
        if new_status == PayrollStatus.APPROVED:
            changes["approved_by"] = user_id
            changes["approved_at"] = self._now()
        self._payrolls.update(current.payroll_id, changes)
        return self.get(current.payroll_id)

    def delete(self, payroll_id: int) -> None:
        payroll = self.get(payroll_id)
        self._payrolls.delete(payroll.payroll_id)
