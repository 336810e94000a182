from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class SystemSetting:
    setting_id: int
    key: str
    value: Optional[str]
    setting_type: str = "string"
    description: Optional[str] = None
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    def typed_value(self) -> Any:
        """Interpret ``value`` according to ``setting_type`` (number / boolean / string)."""
        if self.value is None:
            return None
        if self.setting_type == "number":
            try:
                return int(self.value)
            except ValueError:
                return float(self.value)
        if self.setting_type == "boolean":
            return self.value.strip().lower() in {"1", "true", "yes"}
        return self.value

    def to_dict(self) -> dict:
        return {
            "id": self.setting_id,
            "setting_key": self.key,
            "setting_value": self.value,
            "setting_type": self.setting_type,
            "value": self.typed_value(),
            "description": self.description,
            "updated_by": self.updated_by,
            "updated_at": self.updated_at,
        }
