from __future__ import annotations

from datetime import date

import pytest

from src.hr_payroll.hr_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.hr_payroll.hr_payroll.employees.service import EmployeeService
from src.hr_payroll.hr_payroll.nik.service import NikService, fallback_nik


@pytest.fixture
def nik_service(nik_configs, departments, fixed_now):
    return NikService(nik_configs, departments, now=lambda: fixed_now)


@pytest.fixture
def service(employees, departments, nik_service, fixed_now):
    return EmployeeService(employees, departments, nik_service, now=lambda: fixed_now)


@pytest.fixture
def ops_config(nik_configs, departments):
    return nik_configs.add(departments.get_by_name("Operational"), "OPS")


def _row(first_name, **extra):
    row = {"first_name": first_name, "email": f"{first_name.lower()}@example.com", "position": "Staff"}
    row.update(extra)
    return row


def test_bulk_import_isolates_failures(service, ops_config):
    result = service.bulk_import([
        _row("Andi", department="Operasional", hire_date="06/01/2025"),
        {"first_name": "Tanpa Email", "position": "Staff"},
        "not a row",
        _row("Citra"),
    ])

    assert result["success"] == 2
    assert result["error_count"] == 2
    ok = [r for r in result["results"] if r["success"]]
    failed = [r for r in result["results"] if not r["success"]]
    assert [r["employee"]["nik"] for r in ok] == ["OPS001", "OPS002"]
    assert ok[0]["employee"]["hire_date"] == date(2025, 1, 6)
    assert [r["index"] for r in failed] == [1, 2]
    assert failed[0]["kind"] == "validation_error"


def test_bulk_import_defaults_department(service, ops_config, departments):
    result = service.bulk_import([_row("Dewi", department="Marketing"), _row("Eko")])

    ops_id = departments.get_by_name("Operational").department_id
    assert all(r["employee"]["department_id"] == ops_id for r in result["results"])


def test_bulk_import_hire_date_defaults_to_today(service, ops_config):
    result = service.bulk_import([_row("Fajar")])
    assert result["results"][0]["employee"]["hire_date"] == date(2026, 3, 2)


def test_fallback_nik_without_any_config(service, fixed_now):
    result = service.bulk_import([_row("Gita")])
    assert result["results"][0]["employee"]["nik"] == fallback_nik(fixed_now)


def test_generated_nik_conflict_retries_once(service, employees, ops_config, fixed_now):
    employees.taken_niks.add("OPS001")

    emp = service.create(_row("Hana", department_id=2, hire_date="2025-02-01"))

    assert emp.nik == fallback_nik(fixed_now, 8)
    assert len(emp.nik) == 11


def test_explicit_nik_conflict_is_not_retried(service, employees):
    employees.taken_niks.add("X001")
    with pytest.raises(ConflictError):
        service.create(_row("Indra", nik="X001", hire_date="2025-02-01"))


def test_create_requires_fields_and_known_department(service):
    with pytest.raises(ValidationError):
        service.create({"first_name": "Joko", "email": "joko@example.com", "hire_date": "2025-02-01"})
    with pytest.raises(ValidationError):
        service.create(_row("Joko", hire_date="01/02/2025"))
    with pytest.raises(NotFoundError):
        service.create(_row("Joko", department="Marketing", hire_date="2025-02-01"))


def test_create_without_department_keeps_nik_empty(service):
    emp = service.create(_row("Kiki", hire_date="2025-02-01"))
    assert emp.nik is None
    assert emp.department_id is None


def test_duplicate_email_is_rejected(service):
    service.create(_row("Lina", hire_date="2025-02-01"))
    with pytest.raises(ConflictError):
        service.create(_row("Lina", hire_date="2025-03-01"))


def test_update_and_delete(service, employees):
    emp = service.create(_row("Made", hire_date="2025-02-01"))

    updated = service.update(emp.employee_id, {"position": "Supervisor", "department": "finance"})
    assert updated.position == "Supervisor"
    assert updated.department_id == 3

    with pytest.raises(ValidationError):
        service.update(emp.employee_id, {"hire_date": ""})

    service.delete(emp.employee_id)
    assert employees.deleted == [emp.employee_id]
    with pytest.raises(NotFoundError):
        service.get(emp.employee_id)
