from __future__ import annotations

from typing import Any, Sequence

from ..common.datetime_utils import parse_date_field
from ..common.validators import optional_int
from .model import AttendanceRecord
from .repository import AttendanceRepository


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list_records(self, *, employee_id: Any = None, on_date: Any = None) -> Sequence[AttendanceRecord]:
        return self._attendance.list(
            employee_id=optional_int(employee_id, "Karyawan"),
            on_date=parse_date_field(on_date, "Tanggal") if on_date else None,
        )
