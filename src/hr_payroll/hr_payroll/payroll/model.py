from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO
from ..core.enums import ComponentCategory, ComponentType, PayrollStatus


@dataclass(frozen=True)
class PayrollComponent:
    """Komponen gaji global (persentase dari gaji pokok atau nominal tetap)."""

    component_id: int
    name: str
    type: ComponentType
    category: ComponentCategory
    percentage: Decimal = ZERO
    amount: Decimal = ZERO
    is_active: bool = True
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_percentage(self) -> bool:
        return self.percentage > 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["id"] = data.pop("component_id")
        data["is_percentage"] = self.is_percentage
        return data


@dataclass(frozen=True)
class ManualDeductions:
    kasbon: Decimal = ZERO
    telat: Decimal = ZERO
    angsuran_kredit: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.kasbon + self.telat + self.angsuran_kredit


@dataclass(frozen=True)
class CalculatedComponent:
    name: str
    type: ComponentType
    category: ComponentCategory
    percentage: Decimal
    amount: Decimal
    is_percentage: bool


@dataclass(frozen=True)
class PayrollTotals:
    basic_salary: Decimal
    total_income: Decimal
    total_auto_deduction: Decimal
    total_manual_deduction: Decimal
    total_deduction: Decimal
    net_salary: Decimal
    pendapatan_tetap: Decimal
    pendapatan_tidak_tetap: Decimal
    total_pendapatan: Decimal


@dataclass(frozen=True)
class PayrollBreakdown:
    calculated_components: list[CalculatedComponent]
    totals: PayrollTotals
    pure_basic_salary: Decimal
    allowances: dict[str, Decimal]
    manual_deductions: ManualDeductions

    @property
    def breakdown_pendapatan(self) -> dict:
        return {
            "pendapatan_tetap": {
                "gaji_pokok": self.pure_basic_salary,
                "komponen_pendapatan": self.totals.total_income,
                "total": self.totals.pendapatan_tetap,
            },
            "pendapatan_tidak_tetap": {
                **self.allowances,
                "total": self.totals.pendapatan_tidak_tetap,
            },
            "total_pendapatan": self.totals.total_pendapatan,
        }

    def to_dict(self) -> dict:
        return {
            "calculated_components": [asdict(c) for c in self.calculated_components],
            "totals": asdict(self.totals),
            "pure_basic_salary": self.pure_basic_salary,
            "manual_deductions": asdict(self.manual_deductions),
            "breakdown_pendapatan": self.breakdown_pendapatan,
        }


@dataclass(frozen=True)
class Payroll:
    """Slip gaji tersimpan: satu baris per karyawan per bulan ``payment_date``."""

    payroll_id: int
    employee_id: int
    pay_period_start: date
    pay_period_end: date
    payment_date: date
    status: PayrollStatus = PayrollStatus.PENDING
    amounts: dict[str, Decimal] = field(default_factory=dict)
    employee_name: Optional[str] = None
    created_by: Optional[int] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.payroll_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "pay_period_start": self.pay_period_start,
            "pay_period_end": self.pay_period_end,
            "payment_date": self.payment_date,
            "status": self.status.value,
            **self.amounts,
            "created_by": self.created_by,
            "approved_by": self.approved_by,
            "approved_at": self.approved_at,
            "created_at": self.created_at,
        }


# Stored monetary columns of ``payrolls``, in table order.
PAYROLL_AMOUNT_FIELDS = (
    "basic_salary",
    "gross_salary",
    "position_allowance",
    "management_allowance",
    "phone_allowance",
    "incentive_allowance",
    "overtime_allowance",
    "total_allowances",
    "bpjs_health_company",
    "jht_company",
    "jkk_company",
    "jkm_company",
    "jp_company",
    "subtotal_company",
    "bpjs_health_employee",
    "jht_employee",
    "jp_employee",
    "subtotal_employee",
    "kasbon",
    "telat",
    "angsuran_kredit",
    "total_deductions",
    "total_pendapatan",
    "net_salary",
)
