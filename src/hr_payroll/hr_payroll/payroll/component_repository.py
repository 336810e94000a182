from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import PayrollComponent


class PayrollComponentRepository(Protocol):
    def list_all(self) -> Sequence[PayrollComponent]:
        raise NotImplementedError

    def list_active(self) -> Sequence[PayrollComponent]:
        raise NotImplementedError

    def get_by_id(self, component_id: int) -> Optional[PayrollComponent]:
        raise NotImplementedError

    def create(self, fields: dict[str, Any]) -> int:
        raise NotImplementedError

    def update(self, component_id: int, changes: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, component_id: int) -> bool:
        raise NotImplementedError

    def toggle(self, component_id: int) -> bool:
        """Flip ``is_active`` atomically."""

        raise NotImplementedError
