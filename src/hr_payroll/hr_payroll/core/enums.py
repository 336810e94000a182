from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Peran pengguna untuk otorisasi."""

    ADMIN = "admin"
    HRD = "hrd"
    KARYAWAN = "karyawan"


class RequestStatus(str, Enum):
    """Status alur persetujuan (cuti, izin/sakit)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PayrollStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PAID = "PAID"
    REJECTED = "REJECTED"
    UNPAID = "UNPAID"


class ComponentType(str, Enum):
    """Sisi slip gaji tempat komponen dijumlahkan."""

    INCOME = "income"
    DEDUCTION = "deduction"


class ComponentCategory(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"
    BPJS = "bpjs"
    ALLOWANCE = "allowance"


class SickLeaveKind(str, Enum):
    IZIN = "izin"
    SAKIT = "sakit"


class ExportType(str, Enum):
    EMPLOYEES = "employees"
    LEAVE = "leave"
    ATTENDANCE = "attendance"
