from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.hr_payroll.hr_payroll.core.enums import ComponentCategory, ComponentType, PayrollStatus, RequestStatus
from src.hr_payroll.hr_payroll.core.exceptions import ConflictError
from src.hr_payroll.hr_payroll.departments.model import Department
from src.hr_payroll.hr_payroll.employees.model import Employee
from src.hr_payroll.hr_payroll.leave.model import LeaveQuota, LeaveRequest
from src.hr_payroll.hr_payroll.nik.model import DepartmentNikConfig
from src.hr_payroll.hr_payroll.payroll.model import PAYROLL_AMOUNT_FIELDS, Payroll, PayrollComponent
from src.hr_payroll.hr_payroll.salaries.model import Salary
from src.hr_payroll.hr_payroll.sick_leave.model import SickLeave

WIB = timezone(timedelta(hours=7))


class FakeDepartmentRepo:
    def __init__(self, names=("General", "Operational")):
        self.items: dict[int, Department] = {}
        for name in names:
            self.create(name=name)

    def list_all(self):
        return sorted(self.items.values(), key=lambda d: d.name)

    def get_by_id(self, department_id):
        return self.items.get(int(department_id))

    def get_by_name(self, name):
        for d in self.items.values():
            if d.name.lower() == name.lower():
                return d
        return None

    def create(self, *, name):
        new_id = len(self.items) + 1
        self.items[new_id] = Department(department_id=new_id, name=name)
        return new_id

    def rename(self, department_id, *, name):
        self.items[department_id] = replace(self.items[department_id], name=name)
        return True

    def delete(self, department_id):
        return self.items.pop(department_id, None) is not None

    def count_employees(self, department_id):
        return 0


class FakeNikConfigRepo:
    def __init__(self):
        self.items: dict[int, DepartmentNikConfig] = {}
        self.employees_with_nik: dict[int, int] = {}

    def add(self, department: Department, prefix, *, current_sequence=1, sequence_length=3,
            format_pattern="PREFIX + SEQUENCE", is_active=True):
        return self.create(
            department_id=department.department_id,
            department_name=department.name,
            prefix=prefix,
            current_sequence=current_sequence,
            sequence_length=sequence_length,
            format_pattern=format_pattern,
            is_active=is_active,
        )

    def list_all(self):
        return list(self.items.values())

    def get_by_id(self, config_id):
        return self.items.get(int(config_id))

    def get_by_department_id(self, department_id):
        for c in self.items.values():
            if c.department_id == department_id:
                return c
        return None

    def get_active_by_department_id(self, department_id):
        for c in self.items.values():
            if c.department_id == department_id and c.is_active:
                return c
        return None

    def get_active_by_department_name(self, department_name):
        for c in self.items.values():
            if c.department_name.lower() == department_name.lower() and c.is_active:
                return c
        return None

    def create(self, **fields):
        new_id = len(self.items) + 1
        self.items[new_id] = DepartmentNikConfig(config_id=new_id, **fields)
        return new_id

    def update(self, config_id, changes):
        fields = {k: (bool(v) if k == "is_active" else v) for k, v in changes.items()}
        self.items[config_id] = replace(self.items[config_id], **fields)
        return True

    def delete(self, config_id):
        return self.items.pop(config_id, None) is not None

    def reserve_next(self, config_id):
        cfg = self.items.get(config_id)
        if not cfg or not cfg.is_active:
            return None
        self.items[config_id] = replace(cfg, current_sequence=cfg.current_sequence + 1)
        return cfg

    def count_employees_with_nik(self, department_id):
        return self.employees_with_nik.get(department_id, 0)


class FakeEmployeeRepo:
    def __init__(self, departments: FakeDepartmentRepo | None = None):
        self.items: dict[int, Employee] = {}
        self.taken_niks: set[str] = set()
        self.departments = departments
        self.deleted: list[int] = []

    def add(self, **fields):
        new_id = len(self.items) + 1
        fields.setdefault("last_name", "")
        fields.setdefault("position", "Staff")
        fields.setdefault("hire_date", date(2025, 1, 6))
        fields.setdefault("email", f"emp{new_id}@example.com")
        self.items[new_id] = Employee(employee_id=new_id, **fields)
        return self.items[new_id]

    def list_all(self):
        return list(self.items.values())

    def get_by_id(self, employee_id):
        return self.items.get(int(employee_id))

    def get_by_user_id(self, user_id):
        for e in self.items.values():
            if e.user_id == user_id:
                return e
        return None

    def get_by_email(self, email):
        for e in self.items.values():
            if e.email.lower() == email.lower():
                return e
        return None

    def create(self, data):
        if data.nik and (data.nik in self.taken_niks or any(e.nik == data.nik for e in self.items.values())):
            raise ConflictError("NIK sudah digunakan", details={"field": "nik", "value": data.nik})
        new_id = len(self.items) + 1
        dept = self.departments.get_by_id(data.department_id) if self.departments and data.department_id else None
        self.items[new_id] = Employee(
            employee_id=new_id,
            department_name=dept.name if dept else None,
            **data.__dict__,
        )
        return new_id

    def update(self, employee_id, changes):
        self.items[employee_id] = replace(self.items[employee_id], **changes)
        return True

    def delete_cascade(self, employee_id):
        self.deleted.append(employee_id)
        return self.items.pop(employee_id, None) is not None


class FakeSalaryRepo:
    def __init__(self):
        self.items: dict[int, Salary] = {}

    def add(self, employee_id, nik, basic_salary, **allowances):
        new_id = len(self.items) + 1
        self.items[new_id] = Salary(
            salary_id=new_id, employee_id=employee_id, nik=nik, basic_salary=Decimal(basic_salary),
            **{k: Decimal(v) for k, v in allowances.items()},
        )
        return self.items[new_id]

    def list_all(self):
        return [s.to_dict() for s in self.items.values()]

    def get_by_id(self, salary_id):
        return self.items.get(int(salary_id))

    def get_by_employee_id(self, employee_id):
        for s in self.items.values():
            if s.employee_id == employee_id:
                return s
        return None

    def get_by_nik(self, nik):
        for s in self.items.values():
            if s.nik == nik:
                return s
        return None

    def create(self, *, employee_id, nik, basic_salary, allowances):
        new_id = len(self.items) + 1
        self.items[new_id] = Salary(
            salary_id=new_id, employee_id=employee_id, nik=nik, basic_salary=basic_salary, **allowances
        )
        return new_id

    def update(self, salary_id, changes):
        self.items[salary_id] = replace(self.items[salary_id], **changes)
        return True

    def delete(self, salary_id):
        return self.items.pop(salary_id, None) is not None


class FakeComponentRepo:
    def __init__(self, components=()):
        self.items: dict[int, PayrollComponent] = {}
        for c in components:
            self.items[c.component_id] = c

    def add(self, name, ctype, category, *, percentage="0", amount="0", is_active=True):
        new_id = max(self.items, default=0) + 1
        self.items[new_id] = PayrollComponent(
            component_id=new_id, name=name, type=ctype, category=category,
            percentage=Decimal(percentage), amount=Decimal(amount), is_active=is_active,
        )
        return self.items[new_id]

    def list_all(self):
        return list(self.items.values())

    def list_active(self):
        return [c for c in self.items.values() if c.is_active]

    def get_by_id(self, component_id):
        return self.items.get(int(component_id))

    def create(self, fields):
        new_id = max(self.items, default=0) + 1
        self.items[new_id] = PayrollComponent(
            component_id=new_id,
            name=fields["name"],
            type=ComponentType(fields["type"]),
            category=ComponentCategory(fields["category"]),
            percentage=fields["percentage"],
            amount=fields["amount"],
            is_active=bool(fields["is_active"]),
            description=fields["description"],
        )
        return new_id

    def update(self, component_id, changes):
        self.items[component_id] = replace(self.items[component_id], **changes)
        return True

    def delete(self, component_id):
        return self.items.pop(component_id, None) is not None

    def toggle(self, component_id):
        comp = self.items[component_id]
        self.items[component_id] = replace(comp, is_active=not comp.is_active)
        return True


class FakePayrollRepo:
    def __init__(self):
        self.items: dict[int, Payroll] = {}
        self.created_fields: list[dict] = []

    def list(self, *, employee_id=None, status=None):
        return [
            p for p in self.items.values()
            if (employee_id is None or p.employee_id == employee_id) and (status is None or p.status == status)
        ]

    def get_by_id(self, payroll_id):
        return self.items.get(int(payroll_id))

    def exists_for_month(self, employee_id, year, month, *, exclude_id=None):
        return any(
            p.employee_id == employee_id
            and (p.payment_date.year, p.payment_date.month) == (year, month)
            and p.payroll_id != exclude_id
            for p in self.items.values()
        )

    def create(self, fields):
        self.created_fields.append(dict(fields))
        new_id = len(self.items) + 1
        self.items[new_id] = Payroll(
            payroll_id=new_id,
            employee_id=fields["employee_id"],
            pay_period_start=fields["pay_period_start"],
            pay_period_end=fields["pay_period_end"],
            payment_date=fields["payment_date"],
            status=PayrollStatus(fields["status"]),
            amounts={k: fields[k] for k in PAYROLL_AMOUNT_FIELDS},
            created_by=fields.get("created_by"),
        )
        return new_id

    def update(self, payroll_id, changes):
        current = self.items[payroll_id]
        amounts = dict(current.amounts)
        other = {}
        for k, v in changes.items():
            if k in PAYROLL_AMOUNT_FIELDS:
                amounts[k] = v
            elif k == "status":
                other[k] = PayrollStatus(v)
            else:
                other[k] = v
        self.items[payroll_id] = replace(current, amounts=amounts, **other)
        return True

    def delete(self, payroll_id):
        return self.items.pop(payroll_id, None) is not None


class FakeLeaveRequestRepo:
    def __init__(self, quotas: "FakeLeaveQuotaRepo"):
        self.items: dict[int, LeaveRequest] = {}
        self.quotas = quotas

    def add(self, employee_id, start, end, *, status=RequestStatus.PENDING, leave_type="tahunan", reason="Liburan"):
        new_id = len(self.items) + 1
        self.items[new_id] = LeaveRequest(
            request_id=new_id, employee_id=employee_id, leave_type=leave_type, start_date=start, end_date=end,
            reason=reason, status=status, requested_date=start, created_at=datetime(2026, 3, 1, 8, 0, new_id),
        )
        return self.items[new_id]

    def list(self, *, employee_id=None, status=None):
        return [
            r for r in self.items.values()
            if (employee_id is None or r.employee_id == employee_id) and (status is None or r.status == status)
        ]

    def get_by_id(self, request_id):
        return self.items.get(int(request_id))

    def find_overlapping(self, *, employee_id, start_date, end_date, statuses):
        return [
            r for r in self.items.values()
            if r.employee_id == employee_id and r.status in statuses and r.overlaps(start_date, end_date)
        ]

    def create(self, *, employee_id, leave_type, start_date, end_date, reason, requested_date, notes):
        new_id = len(self.items) + 1
        self.items[new_id] = LeaveRequest(
            request_id=new_id, employee_id=employee_id, leave_type=leave_type, start_date=start_date,
            end_date=end_date, reason=reason, status=RequestStatus.PENDING, requested_date=requested_date,
            notes=notes,
        )
        return new_id

    def update(self, request_id, changes):
        fields = {k: (RequestStatus(v) if k == "status" else v) for k, v in changes.items()}
        self.items[request_id] = replace(self.items[request_id], **fields)
        return True

    def approve(self, request_id, *, changes, quota_year, quota_type, quota_days):
        current = self.items[request_id]
        if current.status == RequestStatus.APPROVED:
            return False
        self.items[request_id] = replace(current, status=RequestStatus.APPROVED, **changes)
        if quota_year is not None:
            quota = self.quotas.find(employee_id=current.employee_id, year=quota_year, quota_type=quota_type)
            if quota:
                self.quotas.update(quota.quota_id, {"used_quota": quota.used_quota + quota_days})
        return True

    def delete(self, request_id):
        return self.items.pop(request_id, None) is not None


class FakeLeaveQuotaRepo:
    def __init__(self):
        self.items: dict[int, LeaveQuota] = {}

    def list(self, *, employee_id=None, year=None, quota_type=None):
        return [
            q for q in self.items.values()
            if (employee_id is None or q.employee_id == employee_id)
            and (year is None or q.year == year)
            and (quota_type is None or q.quota_type == quota_type)
        ]

    def get_by_id(self, quota_id):
        return self.items.get(int(quota_id))

    def find(self, *, employee_id, year, quota_type):
        for q in self.items.values():
            if (q.employee_id, q.year, q.quota_type) == (employee_id, year, quota_type):
                return q
        return None

    def create(self, *, employee_id, year, quota_type, total_quota, used_quota):
        new_id = len(self.items) + 1
        self.items[new_id] = LeaveQuota(
            quota_id=new_id, employee_id=employee_id, quota_type=quota_type, year=year,
            total_quota=total_quota, used_quota=used_quota,
        )
        return new_id

    def update(self, quota_id, changes):
        self.items[quota_id] = replace(self.items[quota_id], **changes)
        return True

    def delete(self, quota_id):
        return self.items.pop(quota_id, None) is not None


class FakeSickLeaveRepo:
    def __init__(self):
        self.items: dict[int, SickLeave] = {}

    def list(self, *, employee_id=None, status=None):
        return [
            s for s in self.items.values()
            if (employee_id is None or s.employee_id == employee_id) and (status is None or s.status == status)
        ]

    def get_by_id(self, sick_leave_id):
        return self.items.get(int(sick_leave_id))

    def exists_for_date(self, employee_id, tanggal):
        return any(s.employee_id == employee_id and s.tanggal == tanggal for s in self.items.values())

    def create(self, *, employee_id, tanggal, jenis, alasan, file_path):
        new_id = len(self.items) + 1
        self.items[new_id] = SickLeave(
            sick_leave_id=new_id, employee_id=employee_id, tanggal=tanggal, jenis=jenis, alasan=alasan,
            file_path=file_path, status=RequestStatus.PENDING, created_at=datetime(2026, 3, 2, 9, 0, new_id),
        )
        return new_id

    def decide(self, sick_leave_id, changes):
        current = self.items[sick_leave_id]
        if current.status != RequestStatus.PENDING:
            return False
        fields = {k: (RequestStatus(v) if k == "status" else v) for k, v in changes.items()}
        self.items[sick_leave_id] = replace(current, **fields)
        return True


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 2, 9, 30, 0, tzinfo=WIB)


@pytest.fixture
def today(fixed_now):
    return fixed_now.date()


@pytest.fixture
def departments():
    return FakeDepartmentRepo(("General", "Operational", "Finance"))


@pytest.fixture
def nik_configs():
    return FakeNikConfigRepo()


@pytest.fixture
def employees(departments):
    return FakeEmployeeRepo(departments)


@pytest.fixture
def salaries():
    return FakeSalaryRepo()


@pytest.fixture
def leave_quotas():
    return FakeLeaveQuotaRepo()


@pytest.fixture
def leave_requests(leave_quotas):
    return FakeLeaveRequestRepo(leave_quotas)


@pytest.fixture
def sick_leaves():
    return FakeSickLeaveRepo()


@pytest.fixture
def components():
    return FakeComponentRepo()


@pytest.fixture
def payrolls():
    return FakePayrollRepo()
