from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import parse_date_field, parse_flexible_date
from ..common.validators import optional_int, optional_str, require_non_empty
from ..core.constants import DEFAULT_IMPORT_DEPARTMENT, DEPARTMENT_ALIASES, FALLBACK_NIK_RETRY_DIGITS
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..departments.model import Department
from ..departments.repository import DepartmentRepository
from ..nik.service import NikService, fallback_nik
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT = ("phone_number", "address", "bank_name", "bank_account_number")
_UPDATABLE_TEXT = ("first_name", "last_name", "email", "position", "nik") + _OPTIONAL_TEXT


class EmployeeService:
    """Use cases: employee records and bulk import."""

    def __init__(
        self,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        nik_service: NikService,
        *,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._employees = employees
        self._departments = departments
        self._nik = nik_service
        self._now = now or datetime.now

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get(self, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Karyawan tidak ditemukan", details={"employee_id": employee_id})
        return emp

    def get_by_user(self, user_id: int) -> Employee:
        emp = self._employees.get_by_user_id(int(user_id))
        if not emp:
            raise NotFoundError("Data karyawan untuk user ini tidak ditemukan", details={"user_id": user_id})
        return emp

    # Department resolution

    def _department_by_name(self, name: str) -> Optional[Department]:
        key = name.strip().lower()
        return self._departments.get_by_name(DEPARTMENT_ALIASES.get(key, key))

    def _default_department(self) -> Optional[Department]:
        dept = self._departments.get_by_name(DEFAULT_IMPORT_DEPARTMENT)
        if dept:
            return dept
        all_depts = list(self._departments.list_all())
        return all_depts[0] if all_depts else None

    def _resolve_department(self, payload: dict, *, use_default: bool) -> Optional[int]:
        dept_id = optional_int(payload.get("department_id"), "Departemen")
        if dept_id is not None:
            if not self._departments.get_by_id(dept_id):
                raise NotFoundError("Departemen tidak ditemukan", details={"department_id": dept_id})
            return dept_id

        name = optional_str(payload.get("department"))
        dept = self._department_by_name(name) if name else None
        if dept is None and name and not use_default:
            raise NotFoundError("Departemen tidak ditemukan", details={"department": name})
        if dept is None and use_default:
            dept = self._default_department()
        return dept.department_id if dept else None

    # Create

    def _build(self, payload: dict, *, flexible_dates: bool, department_id: Optional[int], nik: Optional[str]) -> NewEmployee:
        first_name = require_non_empty(payload.get("first_name"), "Nama depan")
        email = require_non_empty(payload.get("email"), "Email")
        if "@" not in email:
            raise ValidationError("Email tidak valid", details={"field": "email", "value": email})
        position = require_non_empty(payload.get("position"), "Jabatan")

        if flexible_dates:
            try:
                hire_date = parse_flexible_date(payload.get("hire_date")) or self._now().date()
                date_of_birth = parse_flexible_date(payload.get("date_of_birth"))
            except ValueError:
                raise ValidationError(
                    "Format tanggal tidak valid (YYYY-MM-DD atau DD/MM/YYYY)",
                    details={"field": "hire_date/date_of_birth"},
                )
        else:
            hire_date = parse_date_field(payload.get("hire_date"), "Tanggal masuk")
            dob = payload.get("date_of_birth")
            date_of_birth = parse_date_field(dob, "Tanggal lahir") if dob else None

        return NewEmployee(
            first_name=first_name,
            last_name=optional_str(payload.get("last_name")) or "",
            email=email,
            position=position,
            hire_date=hire_date,
            date_of_birth=date_of_birth,
            department_id=department_id,
            nik=nik,
            user_id=optional_int(payload.get("user_id"), "User"),
            **{k: optional_str(payload.get(k)) for k in _OPTIONAL_TEXT},
        )

    def _insert_with_retry(self, data: NewEmployee, *, nik_was_generated: bool) -> Employee:
        try:
            new_id = self._employees.create(data)
        except ConflictError as e:
            if e.details.get("field") != "nik" or not nik_was_generated:
                raise
            retry_nik = fallback_nik(self._now(), FALLBACK_NIK_RETRY_DIGITS)
            logger.warning("Generated NIK %s already taken, retrying with %s", data.nik, retry_nik)
            data = replace(data, nik=retry_nik)
            new_id = self._employees.create(data)
        return self.get(new_id)

    def _create(self, payload: dict, *, bulk: bool) -> Employee:
        department_id = self._resolve_department(payload, use_default=bulk)
        # Validate before consuming a NIK sequence number.
        draft = self._build(payload, flexible_dates=bulk, department_id=department_id, nik=None)

        if self._employees.get_by_email(draft.email):
            raise ConflictError("Email sudah digunakan", details={"field": "email", "value": draft.email})

        nik = optional_str(payload.get("nik"))
        generated = nik is None
        if generated and (bulk or department_id is not None):
            nik = self._nik.assign_for_employee(department_id)

        return self._insert_with_retry(replace(draft, nik=nik), nik_was_generated=generated)

    def create(self, payload: dict) -> Employee:
        emp = self._create(payload, bulk=False)
        logger.info("Employee %s created with NIK %s", emp.employee_id, emp.nik)
        return emp

    def bulk_import(self, items: Sequence[Any]) -> dict:
        """Import employees one by one; a failing item never aborts the batch."""
        results: list[dict] = []
        success = 0
        for index, item in enumerate(items):
            try:
                if not isinstance(item, dict):
                    raise ValidationError("Data karyawan harus berupa objek")
                emp = self._create(item, bulk=True)
                success += 1
                results.append({"index": index, "success": True, "employee": emp.to_dict()})
            except DomainError as e:
                logger.info("Bulk employee item %d rejected: %s", index, e.message)
                results.append({"index": index, "success": False, "error": e.message, "kind": e.kind, "data": item})
            except mysql.connector.Error as e:
                logger.exception("Bulk employee item %d failed", index)
                results.append({"index": index, "success": False, "error": str(e), "kind": "internal", "data": item})
        return {"success": success, "error_count": len(results) - success, "results": results}

    # Update / delete

    def update(self, employee_id: int, payload: dict) -> Employee:
        current = self.get(employee_id)
        changes: dict[str, Any] = {}
        for key in _UPDATABLE_TEXT:
            if key in payload:
                if key in ("first_name", "email", "position"):
                    changes[key] = require_non_empty(payload[key], key)
                else:
                    changes[key] = optional_str(payload[key]) if key != "last_name" else (optional_str(payload[key]) or "")
        if "email" in changes and changes["email"].lower() != current.email.lower():
            if self._employees.get_by_email(changes["email"]):
                raise ConflictError("Email sudah digunakan", details={"field": "email"})
        for key, label in (("hire_date", "Tanggal masuk"), ("date_of_birth", "Tanggal lahir")):
            if key in payload:
                changes[key] = parse_date_field(payload[key], label) if payload[key] else None
        if "hire_date" in changes and changes["hire_date"] is None:
            raise ValidationError("Tanggal masuk wajib diisi", details={"field": "hire_date"})
        if "department_id" in payload or "department" in payload:
            changes["department_id"] = self._resolve_department(payload, use_default=False)
        if "user_id" in payload:
            changes["user_id"] = optional_int(payload["user_id"], "User")

        self._employees.update(current.employee_id, changes)
        return self.get(current.employee_id)

    def delete(self, employee_id: int) -> None:
        emp = self.get(employee_id)
        self._employees.delete_cascade(emp.employee_id)
        logger.info("Employee %s deleted with dependent records", emp.employee_id)
