from __future__ import annotations

from decimal import Decimal

import pytest

from src.hr_payroll.hr_payroll.common.validators import parse_amount
from src.hr_payroll.hr_payroll.core.enums import ComponentCategory, ComponentType
from src.hr_payroll.hr_payroll.core.exceptions import InvalidAmountError
from src.hr_payroll.hr_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.hr_payroll.hr_payroll.payroll.model import ManualDeductions, PayrollComponent
from src.hr_payroll.hr_payroll.salaries.model import Salary


def _component(component_id, name, ctype, *, percentage="0", amount="0", is_active=True):
    return PayrollComponent(
        component_id=component_id,
        name=name,
        type=ctype,
        category=ComponentCategory.BPJS,
        percentage=Decimal(percentage),
        amount=Decimal(amount),
        is_active=is_active,
    )


@pytest.fixture
def salary():
    return Salary(
        salary_id=1,
        employee_id=1,
        nik="OPS001",
        basic_salary=Decimal("10000000"),
        position_allowance=Decimal("500000"),
    )


@pytest.fixture
def components():
    return [
        _component(1, "BPJS Ketenagakerjaan JHT (Perusahaan)", ComponentType.INCOME, percentage="3.7"),
        _component(2, "BPJS Kesehatan (Karyawan)", ComponentType.DEDUCTION, percentage="1"),
        _component(3, "Tunjangan Lama", ComponentType.INCOME, amount="999999", is_active=False),
    ]


def test_breakdown_matches_worked_example(salary, components):
    calc = StandardPayrollCalculator()
    result = calc.calculate(
        salary=salary,
        components=components,
        manual=ManualDeductions(kasbon=Decimal("200000")),
    )

    t = result.totals
    assert t.total_income == Decimal("370000.00")
    assert t.total_auto_deduction == Decimal("100000.00")
    assert t.total_manual_deduction == Decimal("200000.00")
    assert t.total_deduction == Decimal("300000.00")
    assert t.pendapatan_tetap == Decimal("10370000.00")
    assert t.pendapatan_tidak_tetap == Decimal("500000.00")
    assert t.total_pendapatan == Decimal("10870000.00")
    assert t.net_salary == Decimal("10570000.00")
    assert t.net_salary == t.total_pendapatan - t.total_deduction

    names = [c.name for c in result.calculated_components]
    assert "Tunjangan Lama" not in names
    assert result.breakdown_pendapatan["pendapatan_tidak_tetap"]["position_allowance"] == Decimal("500000.00")


def test_basic_salary_input_is_echoed_only(salary, components):
    calc = StandardPayrollCalculator()
    without = calc.calculate(salary=salary, components=components, manual=ManualDeductions())
    with_input = calc.calculate(
        salary=salary,
        components=components,
        manual=ManualDeductions(),
        basic_salary_input=Decimal("12345678"),
    )

    assert without.totals.basic_salary == Decimal("10500000.00")
    assert with_input.totals.basic_salary == Decimal("12345678.00")
    assert with_input.totals.net_salary == without.totals.net_salary


def test_calculation_is_pure(salary, components):
    calc = StandardPayrollCalculator()
    first = calc.calculate(salary=salary, components=components, manual=ManualDeductions())
    second = calc.calculate(salary=salary, components=components, manual=ManualDeductions())
    assert first == second


def test_percentage_wins_over_amount_and_rounds_half_up():
    calc = StandardPayrollCalculator()
    both = _component(1, "x", ComponentType.INCOME, percentage="1", amount="5000")
    tiny = _component(2, "y", ComponentType.INCOME, percentage="0.005")
    nothing = _component(3, "z", ComponentType.DEDUCTION)

    assert calc.component_amount(both, Decimal("1000")) == Decimal("10.00")
    assert calc.component_amount(tiny, Decimal("100")) == Decimal("0.01")
    assert calc.component_amount(nothing, Decimal("1000")) == Decimal("0")


@pytest.mark.parametrize("bad", ["NaN", "inf", "abc", True, None])
def test_non_finite_amounts_are_rejected(bad):
    with pytest.raises(InvalidAmountError):
        parse_amount(bad, "kasbon")
