from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login account. ``password_hash`` never leaves the service layer."""

    user_id: int
    username: str
    email: str
    role: Role
    password_hash: Optional[str]
    employee_id: Optional[int] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "employee_id": self.employee_id,
            "last_login": self.last_login,
            "created_at": self.created_at,
        }
