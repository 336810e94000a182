from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .factory import default_format_factory
from .formats.base import NikFormat


@dataclass(frozen=True)
class DepartmentNikConfig:
    """NIK counter and format of one department.

    ``nik_format`` is resolved from ``format_pattern`` when the row is loaded,
    never per issuance.
    """

    config_id: int
    department_id: int
    department_name: str
    prefix: str
    current_sequence: int
    sequence_length: int
    format_pattern: Optional[str]
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    nik_format: NikFormat = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nik_format", default_format_factory.for_pattern(self.format_pattern))

    def padded(self, sequence: Optional[int] = None) -> str:
        value = self.current_sequence if sequence is None else sequence
        return str(int(value)).zfill(int(self.sequence_length))

    def render(self) -> str:
        return self.nik_format.render(self.prefix, self.padded())

    def to_dict(self) -> dict:
        return {
            "id": self.config_id,
            "department_id": self.department_id,
            "department_name": self.department_name,
            "prefix": self.prefix,
            "current_sequence": self.current_sequence,
            "sequence_length": self.sequence_length,
            "format_pattern": self.format_pattern,
            "format_kind": self.nik_format.kind,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class IssuedNik:
    nik: str
    config: DepartmentNikConfig
