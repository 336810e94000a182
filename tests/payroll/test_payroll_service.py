from __future__ import annotations

from decimal import Decimal

import pytest

from src.hr_payroll.hr_payroll.core.enums import ComponentCategory, ComponentType, PayrollStatus
from src.hr_payroll.hr_payroll.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)
from src.hr_payroll.hr_payroll.payroll.component_service import PayrollComponentService
from src.hr_payroll.hr_payroll.payroll.service import PayrollService


@pytest.fixture
def employee(employees):
    return employees.add(first_name="Budi", nik="OPS001", department_id=2)


@pytest.fixture
def service(payrolls, components, salaries, employees, employee, fixed_now):
    salaries.add(employee.employee_id, "OPS001", "10000000", position_allowance="500000")
    components.add("BPJS Ketenagakerjaan JHT (Perusahaan)", ComponentType.INCOME, ComponentCategory.BPJS, percentage="3.7")
    components.add("BPJS Kesehatan (Karyawan)", ComponentType.DEDUCTION, ComponentCategory.BPJS, percentage="1")
    components.add("Uang Makan", ComponentType.INCOME, ComponentCategory.ALLOWANCE, amount="250000")
    return PayrollService(payrolls, components, salaries, employees, now=lambda: fixed_now)


def _payload(employee_id, **extra):
    payload = {
        "employee_id": employee_id,
        "pay_period_start": "2026-03-01",
        "pay_period_end": "2026-03-31",
        "payment_date": "2026-03-25",
    }
    payload.update(extra)
    return payload


def test_calculate_uses_stored_salary(service, employee):
    result = service.calculate(
        employee_id=employee.employee_id,
        basic_salary_input="10500000",
        manual_deductions={"kasbon": 200000},
    )
    assert result.totals.total_income == Decimal("620000.00")
    assert result.totals.total_deduction == Decimal("300000.00")
    assert result.totals.net_salary == Decimal("10820000.00")


def test_calculate_without_salary_row(payrolls, components, salaries, employees):
    emp = employees.add(first_name="Sari")
    service = PayrollService(payrolls, components, salaries, employees)
    with pytest.raises(NotFoundError) as exc:
        service.calculate(employee_id=emp.employee_id)
    assert exc.value.details["reason"] == "salary_not_found"


def test_calculate_rejects_negative_manual_deduction(service, employee):
    with pytest.raises(InvalidAmountError):
        service.calculate(employee_id=employee.employee_id, manual_deductions={"telat": "-1"})


def test_create_fills_missing_amounts(service, payrolls, employee):
    payroll = service.create(_payload(employee.employee_id, kasbon="200000"), created_by=7)

    a = payroll.amounts
    assert a["basic_salary"] == Decimal("10000000.00")
    assert a["position_allowance"] == Decimal("500000.00")
    assert a["total_allowances"] == Decimal("500000.00")
    assert a["jht_company"] == Decimal("370000.00")
    assert a["jkk_company"] == Decimal("0")
    assert a["subtotal_company"] == Decimal("620000.00")
    assert a["bpjs_health_employee"] == Decimal("100000.00")
    assert a["subtotal_employee"] == Decimal("100000.00")
    assert a["total_pendapatan"] == Decimal("11120000.00")
    assert a["total_deductions"] == Decimal("300000.00")
    assert a["net_salary"] == Decimal("10820000.00")
    assert payroll.status == PayrollStatus.PENDING
    assert payrolls.created_fields[0]["created_by"] == 7


def test_create_keeps_given_amounts(service, employee):
    payroll = service.create(_payload(employee.employee_id, net_salary="1234", jht_company="1"))
    assert payroll.amounts["net_salary"] == Decimal("1234.00")
    assert payroll.amounts["jht_company"] == Decimal("1.00")


def test_one_payroll_per_employee_per_month(service, employee):
    service.create(_payload(employee.employee_id))

    with pytest.raises(ConflictError):
        service.create(_payload(employee.employee_id, payment_date="2026-03-02"))

    april = service.create(_payload(employee.employee_id, payment_date="2026-04-25"))
    assert april.payment_date.month == 4

    with pytest.raises(ConflictError):
        service.update(april.payroll_id, {"payment_date": "2026-03-10"})


def test_create_rejects_reversed_period(service, employee):
    with pytest.raises(ValidationError):
        service.create(_payload(employee.employee_id, pay_period_end="2026-02-01"))


def test_status_approval_records_approver(service, employee, fixed_now):
    payroll = service.create(_payload(employee.employee_id))

    approved = service.update_status(payroll.payroll_id, "approved", user_id=3)

    assert approved.status == PayrollStatus.APPROVED
    assert approved.approved_by == 3
    assert approved.approved_at == fixed_now

    with pytest.raises(ValidationError):
        service.update_status(payroll.payroll_id, "DONE")


def test_employee_scope(service, employee):
    payroll = service.create(_payload(employee.employee_id))
    assert service.get(payroll.payroll_id, employee_scope=employee.employee_id) == payroll
    with pytest.raises(AuthorizationError):
        service.get(payroll.payroll_id, employee_scope=-1)


def test_component_stats_and_toggle(components):
    service = PayrollComponentService(components)
    created = service.create({"name": "JKK", "type": "income", "category": "bpjs", "percentage": "0.24"})
    assert created.percentage == Decimal("0.24")

    toggled = service.toggle(created.component_id)
    assert toggled.is_active is False

    stats = service.stats()
    assert stats == {"total": 1, "income_count": 1, "deduction_count": 0, "bpjs_count": 1, "active_count": 0}

    with pytest.raises(ValidationError):
        service.create({"name": "Bad", "type": "income", "category": "bpjs", "percentage": "150"})


def test_create_agrees_with_calculate_when_named_component_has_other_type(payrolls, components, salaries, employees):
    emp = employees.add(first_name="Rina", nik="FIN001")
    salaries.add(emp.employee_id, "FIN001", "10000000")
    components.add("BPJS Ketenagakerjaan JHT (Perusahaan)", ComponentType.INCOME, ComponentCategory.BPJS, percentage="3.7")
    components.add("BPJS Kesehatan (Perusahaan)", ComponentType.DEDUCTION, ComponentCategory.BPJS, percentage="4")
    service = PayrollService(payrolls, components, salaries, employees)

    calculated = service.calculate(employee_id=emp.employee_id)
    stored = service.create(_payload(emp.employee_id)).amounts

    assert calculated.totals.net_salary == Decimal("9970000.00")
    assert stored["net_salary"] == calculated.totals.net_salary
    assert stored["total_pendapatan"] == calculated.totals.total_pendapatan
    assert stored["total_deductions"] == calculated.totals.total_deduction
    assert stored["bpjs_health_company"] == Decimal("0")
    assert stored["subtotal_company"] == Decimal("370000.00")
    assert stored["subtotal_employee"] == Decimal("400000.00")


def test_component_is_active_must_be_boolean(components):
    service = PayrollComponentService(components)
    created = service.create({"name": "JKM", "type": "income", "category": "bpjs", "amount": "1000", "is_active": "false"})
    assert created.is_active is False
    with pytest.raises(ValidationError):
        service.update(created.component_id, {"is_active": "kadang"})
