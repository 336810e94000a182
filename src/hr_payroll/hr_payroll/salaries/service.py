from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

import mysql.connector

from ..common.money import round_currency
from ..common.validators import (
    parse_amount,
    parse_optional_amount,
    require_int,
    require_non_empty,
    require_non_negative,
    require_positive,
)
from ..core.constants import ALLOWANCE_FIELDS
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import Salary
from .repository import SalaryRepository

logger = logging.getLogger(__name__)


def _parse_allowances(payload: dict, *, only_present: bool = False) -> dict[str, Optional[Decimal]]:
    out: dict[str, Optional[Decimal]] = {}
    for name in ALLOWANCE_FIELDS:
        if only_present and name not in payload:
            continue
        amount = require_non_negative(parse_optional_amount(payload.get(name), name), name)
        out[name] = round_currency(amount) if amount is not None else None
    return out


class SalaryService:
    def __init__(self, salaries: SalaryRepository, employees: EmployeeRepository):
        self._salaries = salaries
        self._employees = employees

    def list_salaries(self) -> Sequence[dict]:
        return self._salaries.list_all()

    def get_for_employee(self, employee_id: int) -> Salary:
        salary = self._salaries.get_by_employee_id(int(employee_id))
        if not salary:
            raise NotFoundError("Data gaji karyawan tidak ditemukan", details={"employee_id": employee_id})
        return salary

    def get(self, salary_id: int) -> Salary:
        salary = self._salaries.get_by_id(int(salary_id))
        if not salary:
            raise NotFoundError("Data gaji tidak ditemukan", details={"id": salary_id})
        return salary

    def _check_employee_nik(self, employee_id: int, nik: str, *, employee: Optional[Employee] = None) -> None:
        emp = employee or self._employees.get_by_id(employee_id)
        if emp and emp.nik and emp.nik != nik:
            raise ValidationError(
                "NIK tidak sesuai dengan data karyawan",
                details={"field": "nik", "expected": emp.nik, "actual": nik},
            )

    def create(self, payload: dict) -> Salary:
        employee_id = require_int(payload.get("employee_id"), "Karyawan")
        nik = require_non_empty(payload.get("nik"), "NIK")
        basic = require_positive(parse_amount(payload.get("basic_salary"), "basic_salary"), "basic_salary")
        allowances = _parse_allowances(payload)

        emp = self._employees.get_by_id(employee_id)
        if not emp:
            raise NotFoundError("Karyawan tidak ditemukan", details={"employee_id": employee_id})
        self._check_employee_nik(employee_id, nik, employee=emp)
        if self._salaries.get_by_employee_id(employee_id):
            raise ConflictError("Data gaji untuk karyawan ini sudah ada", details={"employee_id": employee_id})
        if self._salaries.get_by_nik(nik):
            raise ConflictError("Data gaji untuk NIK ini sudah ada", details={"nik": nik})

        new_id = self._salaries.create(
            employee_id=employee_id,
            nik=nik,
            basic_salary=round_currency(basic),
            allowances=allowances,
        )
        return self.get(new_id)

    def update(self, salary_id: int, payload: dict) -> Salary:
        current = self.get(salary_id)
        changes: dict[str, Any] = dict(_parse_allowances(payload, only_present=True))
        if "basic_salary" in payload:
            basic = require_positive(parse_amount(payload["basic_salary"], "basic_salary"), "basic_salary")
            changes["basic_salary"] = round_currency(basic)
        if "nik" in payload:
            nik = require_non_empty(payload["nik"], "NIK")
            self._check_employee_nik(current.employee_id, nik)
            other = self._salaries.get_by_nik(nik)
            if other and other.salary_id != current.salary_id:
                raise ConflictError("Data gaji untuk NIK ini sudah ada", details={"nik": nik})
            changes["nik"] = nik
        self._salaries.update(current.salary_id, changes)
        return self.get(current.salary_id)

    def delete(self, salary_id: int) -> None:
        salary = self.get(salary_id)
        self._salaries.delete(salary.salary_id)

    def bulk_upload(self, items: Sequence[Any]) -> dict:
        created: list[dict] = []
        errors: list[dict] = []
        for index, item in enumerate(items):
            try:
                if not isinstance(item, dict):
                    raise ValidationError("Data gaji harus berupa objek")
                created.append(self.create(item).to_dict())
            except DomainError as e:
                errors.append({"index": index, "error": e.message, "kind": e.kind, "data": item})
            except mysql.connector.Error as e:
                logger.exception("Bulk salary item %d failed", index)
                errors.append({"index": index, "error": str(e), "kind": "internal", "data": item})
        return {"success": len(created), "error_count": len(errors), "created": created, "errors": errors}
