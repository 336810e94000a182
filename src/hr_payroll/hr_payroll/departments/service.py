from __future__ import annotations

from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, NotFoundError
from .model import Department
from .repository import DepartmentRepository


class DepartmentService:
    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def list_departments(self):
        return self._departments.list_all()

    def get(self, department_id: int) -> Department:
        dept = self._departments.get_by_id(int(department_id))
        if not dept:
            raise NotFoundError("Departemen tidak ditemukan", details={"department_id": department_id})
        return dept

    def create(self, *, name: str) -> Department:
        name = require_non_empty(name, "Nama departemen")
        if self._departments.get_by_name(name):
            raise ConflictError("Nama departemen sudah digunakan", details={"name": name})
        new_id = self._departments.create(name=name)
        return Department(department_id=new_id, name=name)

    def rename(self, department_id: int, *, name: str) -> Department:
        name = require_non_empty(name, "Nama departemen")
        self.get(department_id)
        other = self._departments.get_by_name(name)
        if other and other.department_id != int(department_id):
            raise ConflictError("Nama departemen sudah digunakan", details={"name": name})
        self._departments.rename(int(department_id), name=name)
        return Department(department_id=int(department_id), name=name)

    def delete(self, department_id: int) -> None:
        self.get(department_id)
        in_use = self._departments.count_employees(int(department_id))
        if in_use:
            raise ConflictError(
                "Departemen masih digunakan oleh karyawan",
                details={"department_id": department_id, "employee_count": in_use},
            )
        self._departments.delete(int(department_id))
