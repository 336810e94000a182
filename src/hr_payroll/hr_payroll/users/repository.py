from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Antarmuka repository untuk User."""

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create(self, *, username: str, email: str, password_hash: str, role: Role) -> int:
        raise NotImplementedError

    def update(self, user_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def touch_last_login(self, user_id: int, *, at: datetime) -> None:
        raise NotImplementedError

    def delete(self, user_id: int) -> bool:
        raise NotImplementedError
