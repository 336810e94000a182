from __future__ import annotations

from typing import Any, Sequence

from ..common.money import round_currency
from ..common.validators import optional_str, parse_bool, parse_optional_amount, require_non_empty, require_non_negative
from ..core.enums import ComponentCategory, ComponentType
from ..core.exceptions import NotFoundError, ValidationError
from .component_repository import PayrollComponentRepository
from .model import PayrollComponent

MAX_PERCENTAGE = 100


def _enum_value(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"{field_name} harus salah satu dari: {allowed}", details={"field": field_name})


class PayrollComponentService:
    """Use cases: global payroll component configuration."""

    def __init__(self, components: PayrollComponentRepository):
        self._components = components

    def list_components(self) -> Sequence[PayrollComponent]:
        return self._components.list_all()

    def list_active(self) -> Sequence[PayrollComponent]:
        return self._components.list_active()

    def get(self, component_id: int) -> PayrollComponent:
        comp = self._components.get_by_id(int(component_id))
        if not comp:
            raise NotFoundError("Komponen gaji tidak ditemukan", details={"id": component_id})
        return comp

    def _parse(self, payload: dict, *, partial: bool) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if not partial or "name" in payload:
            out["name"] = require_non_empty(payload.get("name"), "Nama komponen")
        if not partial or "type" in payload:
            out["type"] = _enum_value(ComponentType, payload.get("type"), "type").value
        if not partial or "category" in payload:
            out["category"] = _enum_value(ComponentCategory, payload.get("category"), "category").value
        for key in ("percentage", "amount"):
            if not partial or key in payload:
                value = require_non_negative(parse_optional_amount(payload.get(key), key, default=None), key)
                out[key] = round_currency(value) if value is not None else round_currency(0)
        if "percentage" in out and out["percentage"] > MAX_PERCENTAGE:
            raise ValidationError("Persentase maksimal 100", details={"field": "percentage"})
        if not partial or "is_active" in payload:
            out["is_active"] = int(parse_bool(payload.get("is_active", True), "is_active"))
        if not partial or "description" in payload:
            out["description"] = optional_str(payload.get("description"))
        return out

    def create(self, payload: dict) -> PayrollComponent:
        new_id = self._components.create(self._parse(payload, partial=False))
        return self.get(new_id)

    def update(self, component_id: int, payload: dict) -> PayrollComponent:
        comp = self.get(component_id)
        self._components.update(comp.component_id, self._parse(payload, partial=True))
        return self.get(comp.component_id)

    def delete(self, component_id: int) -> None:
        comp = self.get(component_id)
        self._components.delete(comp.component_id)

    def toggle(self, component_id: int) -> PayrollComponent:
        comp = self.get(component_id)
        self._components.toggle(comp.component_id)
        return self.get(comp.component_id)

    def stats(self) -> dict:
        comps = self._components.list_all()
        return {
            "total": len(comps),
            "income_count": sum(1 for c in comps if c.type == ComponentType.INCOME),
            "deduction_count": sum(1 for c in comps if c.type == ComponentType.DEDUCTION),
            "bpjs_count": sum(1 for c in comps if c.category == ComponentCategory.BPJS),
            "active_count": sum(1 for c in comps if c.is_active),
        }
