from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from ..common.validators import parse_bool, require_int, require_non_empty
from ..core.constants import (
    DEFAULT_FORMAT_PATTERN,
    DEFAULT_NIK_DEPARTMENTS,
    DEFAULT_SEQUENCE_LENGTH,
    FALLBACK_NIK_DIGITS,
    FALLBACK_NIK_PREFIX,
)
from ..core.exceptions import ConflictError, NotConfiguredError, NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from .formats.prefix_concat import PrefixConcatFormat
from .legacy import legacy_formats_for
from .model import DepartmentNikConfig, IssuedNik
from .repository import NikConfigRepository

logger = logging.getLogger(__name__)

MAX_SEQUENCE_LENGTH = 10
_UPDATABLE = ("prefix", "current_sequence", "sequence_length", "format_pattern", "is_active")


def fallback_nik(now: datetime, digits: int = FALLBACK_NIK_DIGITS) -> str:
    """``EMP`` + last ``digits`` digits of the epoch-millis timestamp."""
    millis = str(int(now.timestamp() * 1000))
    return f"{FALLBACK_NIK_PREFIX}{millis[-digits:]}"


class NikService:
    """Use cases: department NIK configuration, issuance and validation."""

    def __init__(
        self,
        configs: NikConfigRepository,
        departments: DepartmentRepository,
        *,
        default_departments: Sequence[str] = DEFAULT_NIK_DEPARTMENTS,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._configs = configs
        self._departments = departments
        self._default_departments = tuple(default_departments)
        self._now = now or datetime.now

    # Lookup

    def list_configs(self) -> Sequence[DepartmentNikConfig]:
        return self._configs.list_all()

    def _default_config(self) -> Optional[DepartmentNikConfig]:
        for name in self._default_departments:
            cfg = self._configs.get_active_by_department_name(name)
            if cfg:
                return cfg
        return None

    def resolve_for_department(self, department_id: int) -> DepartmentNikConfig:
        cfg = self._configs.get_active_by_department_id(int(department_id))
        if cfg:
            return cfg
        cfg = self._default_config()
        if cfg:
            logger.info("No NIK config for department_id=%s, using default %s", department_id, cfg.department_name)
            return cfg
        raise NotConfiguredError(
            "Konfigurasi NIK tidak ditemukan untuk departemen ini",
            details={"department_id": department_id},
        )

    def get_active_config(self, department_name: str) -> DepartmentNikConfig:
        department_name = require_non_empty(department_name, "Departemen")
        cfg = self._configs.get_active_by_department_name(department_name) or self._default_config()
        if not cfg:
            raise NotConfiguredError(
                "Konfigurasi NIK tidak ditemukan untuk departemen ini",
                details={"department": department_name},
            )
        return cfg

    def check(self, department_name: str) -> dict:
        department_name = require_non_empty(department_name, "Departemen")
        dept = self._departments.get_by_name(department_name)
        if not dept:
            return {"department": None, "nik_config": None, "has_config": False}
        cfg = self._configs.get_active_by_department_id(dept.department_id)
        return {
            "department": dept.to_dict(),
            "nik_config": cfg.to_dict() if cfg else None,
            "has_config": cfg is not None,
        }

    # Issuance

    def _issue(self, cfg: DepartmentNikConfig) -> IssuedNik:
        locked = self._configs.reserve_next(cfg.config_id)
        if not locked:
            raise NotConfiguredError(
                "Konfigurasi NIK tidak aktif",
                details={"department": cfg.department_name},
            )
        nik = locked.render()
        updated = replace(locked, current_sequence=locked.current_sequence + 1)
        logger.info("Issued NIK %s for %s (next sequence %d)", nik, locked.department_name, updated.current_sequence)
        return IssuedNik(nik=nik, config=updated)

    def generate_next(self, department_id: int) -> IssuedNik:
        return self._issue(self.resolve_for_department(department_id))

    def generate_next_for_department_name(self, department_name: str) -> IssuedNik:
        return self._issue(self.get_active_config(department_name))

    def assign_for_employee(self, department_id: Optional[int]) -> str:
        """NIK for a new employee; never fails because of missing configuration.

        Without a resolvable config the degraded ``EMP`` + timestamp identifier is
        returned and the case is logged.
        """
        try:
            if department_id is None:
                cfg = self._default_config()
                if not cfg:
                    raise NotConfiguredError("Konfigurasi NIK default tidak ditemukan")
                return self._issue(cfg).nik
            return self.generate_next(department_id).nik
        except (NotConfiguredError, NotFoundError) as e:
            nik = fallback_nik(self._now())
            logger.warning("NIK fallback %s used for department_id=%s: %s", nik, department_id, e.message)
            return nik

    # Validation

    def validate_format(self, nik_input: str, department_name: str) -> dict:
        """Check ``nik_input`` against the department's own active config.

        No default-department fallback here: a NIK is only valid for the
        department it was requested for.
        """
        nik_input = require_non_empty(nik_input, "NIK")
        department_name = require_non_empty(department_name, "Departemen")
        dept = self._departments.get_by_name(department_name)
        if not dept:
            raise NotFoundError("Departemen tidak ditemukan", details={"department": department_name})
        cfg = self._configs.get_active_by_department_id(dept.department_id)
        if not cfg:
            raise NotConfiguredError(
                "Konfigurasi NIK tidak ditemukan untuk departemen ini",
                details={"department": dept.name},
            )

        legacy = legacy_formats_for(dept.name)
        is_valid = cfg.nik_format.matches(nik_input, cfg.prefix, cfg.sequence_length) or any(
            PrefixConcatFormat().matches(nik_input, prefix, length) for prefix, length in legacy
        )

        examples: list[str] = [PrefixConcatFormat().example(prefix, length) for prefix, length in legacy]
        own = cfg.nik_format.example(cfg.prefix, cfg.sequence_length)
        if own not in examples:
            examples.append(own)

        return {
            "is_valid": is_valid,
            "expected_format": " atau ".join(examples),
            "actual_input": nik_input,
            "config": cfg.to_dict(),
        }

    # Administration

    @staticmethod
    def _check_sequence_length(value: Any) -> int:
        length = require_int(value, "Panjang sequence")
        if not 1 <= length <= MAX_SEQUENCE_LENGTH:
            raise ValidationError(
                f"Panjang sequence harus antara 1 dan {MAX_SEQUENCE_LENGTH}",
                details={"field": "sequence_length"},
            )
        return length

    @staticmethod
    def _check_sequence(value: Any) -> int:
        seq = require_int(value, "Sequence")
        if seq < 1:
            raise ValidationError("Sequence minimal 1", details={"field": "current_sequence"})
        return seq

    def get_config(self, config_id: int) -> DepartmentNikConfig:
        cfg = self._configs.get_by_id(int(config_id))
        if not cfg:
            raise NotFoundError("Konfigurasi NIK tidak ditemukan", details={"id": config_id})
        return cfg

    def create_config(
        self,
        *,
        department_id: Any,
        prefix: str,
        current_sequence: Any = None,
        sequence_length: Any = None,
        format_pattern: Optional[str] = None,
        is_active: bool = True,
    ) -> DepartmentNikConfig:
        department_id = require_int(department_id, "Departemen")
        prefix = require_non_empty(prefix, "Prefix")
        seq = self._check_sequence(current_sequence) if current_sequence not in (None, "") else 1
        length = (
            self._check_sequence_length(sequence_length)
            if sequence_length not in (None, "")
            else DEFAULT_SEQUENCE_LENGTH
        )
        pattern = (format_pattern or "").strip() or DEFAULT_FORMAT_PATTERN

        dept = self._departments.get_by_id(department_id)
        if not dept:
            raise NotFoundError("Departemen tidak ditemukan", details={"department_id": department_id})
        if self._configs.get_by_department_id(department_id):
            raise ConflictError(
                "Konfigurasi NIK untuk departemen ini sudah ada",
                details={"department_id": department_id},
            )

        config_id = self._configs.create(
            department_id=department_id,
            department_name=dept.name,
            prefix=prefix,
            current_sequence=seq,
            sequence_length=length,
            format_pattern=pattern,
            is_active=parse_bool(is_active, "is_active"),
        )
        return self.get_config(config_id)

    def update_config(self, config_id: int, payload: dict) -> DepartmentNikConfig:
        cfg = self.get_config(config_id)
        changes: dict[str, Any] = {}
        for key in _UPDATABLE:
            if key not in payload:
                continue
            value = payload[key]
            if key == "prefix":
                changes[key] = require_non_empty(value, "Prefix")
            elif key == "current_sequence":
                seq = self._check_sequence(value)
                if seq < cfg.current_sequence:
                    raise ValidationError(
                        "Sequence tidak boleh diturunkan",
                        details={"current_sequence": cfg.current_sequence, "requested": seq},
                    )
                changes[key] = seq
            elif key == "sequence_length":
                changes[key] = self._check_sequence_length(value)
            elif key == "format_pattern":
                changes[key] = (value or "").strip() or None
            else:
                changes[key] = int(parse_bool(value, "is_active"))

        if changes.get("is_active") and not cfg.is_active:
            other = self._configs.get_active_by_department_id(cfg.department_id)
            if other and other.config_id != cfg.config_id:
                raise ConflictError("Departemen sudah memiliki konfigurasi aktif")

        self._configs.update(cfg.config_id, changes)
        return self.get_config(cfg.config_id)

    def delete_config(self, config_id: int) -> None:
        cfg = self.get_config(config_id)
        issued = self._configs.count_employees_with_nik(cfg.department_id)
        if issued:
            raise ConflictError(
                "Konfigurasi NIK masih dipakai oleh karyawan",
                details={"department_id": cfg.department_id, "employee_count": issued},
            )
        self._configs.delete(cfg.config_id)
