from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Department:
    department_id: int
    name: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"id": self.department_id, "name": self.name, "created_at": self.created_at}
