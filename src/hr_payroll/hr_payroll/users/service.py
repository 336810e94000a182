from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

import mysql.connector
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_str, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, DomainError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def parse_role(value: Any) -> Role:
    try:
        return Role(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError("Role tidak valid", details={"role": value})


def _require_email(value: Any) -> str:
    email = require_non_empty(value, "Email")
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValidationError("Format email tidak valid", details={"email": email})
    return email


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    email: str
    role: Role
    employee_id: Optional[int]

    def to_dict(self) -> dict:
        return {"id": self.user_id, "email": self.email, "role": self.role.value, "employee_id": self.employee_id}


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(
        self,
        users: UserRepository,
        employees: EmployeeRepository,
        *,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._users = users
        self._employees = employees
        self._now = now or datetime.now

    def _employee_id_for(self, user: User) -> Optional[int]:
        if user.employee_id is not None:
            return user.employee_id
        emp = self._employees.get_by_user_id(user.user_id)
        return emp.employee_id if emp else None

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("Format email atau password tidak valid.")

        user = self._users.get_by_email(email)
        if not user or not user.password_hash:
            raise AuthenticationError("Email atau password salah")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            raise AuthenticationError("Email atau password salah")

        self._users.touch_last_login(user.user_id, at=self._now())
        return SessionUser(
            user_id=user.user_id,
            email=user.email,
            role=user.role,
            employee_id=self._employee_id_for(user),
        )

    def session_user(self, user_id: int) -> SessionUser:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise AuthenticationError("Sesi tidak valid, silakan login ulang")
        return SessionUser(user_id=user.user_id, email=user.email, role=user.role, employee_id=self._employee_id_for(user))


class UserService:
    """Use case: manage user accounts (registration, admin CRUD, bulk)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User tidak ditemukan", details={"user_id": user_id})
        return user

    def create_account(self, *, username: Any, email: Any, password: Any, role: Role) -> User:
        username = require_non_empty(username, "Username")
        email = _require_email(email)
        require_min_length(str(password or ""), "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("Email sudah terdaftar", details={"email": email})

        password_hash = generate_password_hash(str(password))
        user_id = self._users.create(username=username, email=email, password_hash=password_hash, role=role)
        return User(user_id=user_id, username=username, email=email, role=role, password_hash=password_hash)

    def register(self, payload: dict) -> User:
        """Self-service sign-up; always role ``karyawan``."""
        return self.create_account(
            username=payload.get("name") or payload.get("username"),
            email=payload.get("email"),
            password=payload.get("password"),
            role=Role.KARYAWAN,
        )

    def admin_create(self, payload: dict) -> User:
        return self.create_account(
            username=payload.get("username"),
            email=payload.get("email"),
            password=payload.get("password"),
            role=parse_role(payload.get("role")),
        )

    def update(self, user_id: int, payload: dict) -> User:
        self.get(user_id)
        changes: dict = {}
        if optional_str(payload.get("email")):
            changes["email"] = _require_email(payload.get("email"))
        if optional_str(payload.get("username")):
            changes["username"] = optional_str(payload.get("username"))
        if payload.get("role"):
            changes["role"] = parse_role(payload.get("role")).value
        if payload.get("password"):
            require_min_length(str(payload["password"]), "Password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(str(payload["password"]))

        if not changes:
            raise ValidationError("Tidak ada data yang diupdate.")

        if "email" in changes:
            other = self._users.get_by_email(changes["email"])
            if other and other.user_id != int(user_id):
                raise ConflictError("Email sudah terdaftar", details={"email": changes["email"]})

        self._users.update(int(user_id), changes)
        return self.get(user_id)

    def delete(self, user_id: int) -> None:
        self.get(user_id)
        self._users.delete(int(user_id))

    def bulk_create(self, items: Sequence[Any]) -> dict:
        results: list[dict] = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                results.append({"index": index, "success": False, "error": "Item harus berupa objek", "kind": "validation_error"})
                continue
            if not all(item.get(k) for k in ("username", "email", "password", "role")):
                results.append(
                    {
                        "index": index,
                        "success": False,
                        "error": "Field username, email, password, role wajib diisi.",
                        "kind": "validation_error",
                        "data": {"username": item.get("username"), "email": item.get("email")},
                    }
                )
                continue
            try:
                user = self.admin_create(item)
                results.append({"index": index, "success": True, "user": user.to_dict()})
            except DomainError as e:
                logger.warning("Bulk user item %s rejected: %s", index, e.message)
                results.append({"index": index, "success": False, "error": e.message, "kind": e.kind,
                                "data": {"username": item.get("username"), "email": item.get("email")}})
            except mysql.connector.Error as e:
                logger.exception("Bulk user item %s failed on database", index)
                results.append({"index": index, "success": False, "error": str(e), "kind": "internal",
                                "data": {"username": item.get("username"), "email": item.get("email")}})

        failed = sum(1 for r in results if not r["success"])
        return {"success": len(results) - failed, "error_count": failed, "results": results}
