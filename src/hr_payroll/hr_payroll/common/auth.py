from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError

HR_ROLES = (Role.ADMIN, Role.HRD)


@dataclass(frozen=True)
class CurrentUser:
    """What the controllers read back from the Flask session."""

    user_id: int
    role: Role
    employee_id: Optional[int]

    @property
    def is_hr(self) -> bool:
        return self.role in HR_ROLES


def current_user() -> CurrentUser:
    if "user_id" not in session:
        raise AuthenticationError("Silakan login terlebih dahulu")
    employee_id = session.get("employee_id")
    return CurrentUser(
        user_id=int(session["user_id"]),
        role=Role(session.get("role", Role.KARYAWAN.value)),
        employee_id=int(employee_id) if employee_id is not None else None,
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user.role.value not in allowed:
                raise AuthorizationError("Anda tidak memiliki akses")
            return view(*args, **kwargs)

        return wrapper

    return decorator


hr_required = roles_required(*HR_ROLES)
admin_required = roles_required(Role.ADMIN)
