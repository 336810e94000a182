from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import DepartmentNikConfig


class NikConfigRepository(Protocol):
    """Antarmuka repository untuk DepartmentNikConfig.

    ``reserve_next`` is the only write on the issuance path: it must read the
    counter and increment it inside one transaction holding the row lock.
    """

    def list_all(self) -> Sequence[DepartmentNikConfig]:
        raise NotImplementedError

    def get_by_id(self, config_id: int) -> Optional[DepartmentNikConfig]:
        raise NotImplementedError

    def get_by_department_id(self, department_id: int) -> Optional[DepartmentNikConfig]:
        raise NotImplementedError

    def get_active_by_department_id(self, department_id: int) -> Optional[DepartmentNikConfig]:
        raise NotImplementedError

    def get_active_by_department_name(self, department_name: str) -> Optional[DepartmentNikConfig]:
        raise NotImplementedError

    def create(
        self,
        *,
        department_id: int,
        department_name: str,
        prefix: str,
        current_sequence: int,
        sequence_length: int,
        format_pattern: Optional[str],
        is_active: bool,
    ) -> int:
        raise NotImplementedError

    def update(self, config_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, config_id: int) -> bool:
        raise NotImplementedError

    def reserve_next(self, config_id: int) -> Optional[DepartmentNikConfig]:
        """Lock the active row, increment its counter by one and return the row as read before the increment."""

        raise NotImplementedError

    def count_employees_with_nik(self, department_id: int) -> int:
        raise NotImplementedError
