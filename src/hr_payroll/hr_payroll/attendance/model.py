from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Entitas domain: catatan kehadiran harian."""

    record_id: int
    employee_id: int
    date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: str
    notes: Optional[str] = None
    employee_name: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["id"] = data.pop("record_id")
        return data
