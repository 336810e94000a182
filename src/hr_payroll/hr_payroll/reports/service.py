from __future__ import annotations

import calendar
import io
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence

import pandas as pd

from ..common.datetime_utils import parse_month
from ..core.constants import EXPORT_MIMETYPE, EXPORT_SHEET_NAME
from ..core.enums import ExportType
from ..core.exceptions import ValidationError
from .repository import ReportRepository

EMPTY = "-"


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
    mimetype: str = EXPORT_MIMETYPE


def _fmt_date(value: Any) -> str:
    # id-ID locale style
    if isinstance(value, (date, datetime)):
        return value.strftime("%d/%m/%Y")
    return EMPTY


def _fmt_time(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%H.%M.%S")
    return EMPTY


def _name(row: dict) -> str:
    return f"{row.get('first_name') or ''} {row.get('last_name') or ''}".strip() or EMPTY


def _employee_record(r: dict) -> dict:
    return {
        "NIK": r.get("nik") or EMPTY,
        "Nama": _name(r),
        "Email": r.get("email") or EMPTY,
        "Departemen": r.get("department_name") or EMPTY,
        "Jabatan": r.get("position") or EMPTY,
        "Tanggal Bergabung": _fmt_date(r.get("hire_date")),
        "Status": "Active",
        "Tanggal Dibuat": _fmt_date(r.get("created_at")),
    }


def _leave_record(r: dict) -> dict:
    start, end = r.get("start_date"), r.get("end_date")
    duration = str(abs((end - start).days) + 1) if start and end else EMPTY
    return {
        "NIK": r.get("nik") or EMPTY,
        "Nama": _name(r),
        "Departemen": r.get("department_name") or EMPTY,
        "Jenis Cuti": r.get("leave_type") or EMPTY,
        "Tanggal Mulai": _fmt_date(start),
        "Tanggal Selesai": _fmt_date(end),
        "Durasi (Hari)": duration,
        "Alasan": r.get("reason") or EMPTY,
        "Status": r.get("status") or EMPTY,
        "Disetujui Oleh": r.get("approved_by_name") or EMPTY,
        "Ditolak Oleh": r.get("rejected_by_name") or EMPTY,
        "Tanggal Pengajuan": _fmt_date(r.get("created_at")),
    }


def _attendance_record(r: dict) -> dict:
    return {
        "NIK": r.get("nik") or EMPTY,
        "Nama": _name(r),
        "Departemen": r.get("department_name") or EMPTY,
        "Tanggal": _fmt_date(r.get("date")),
        "Check In": _fmt_time(r.get("check_in_time")),
        "Check Out": _fmt_time(r.get("check_out_time")),
        "Status": r.get("status") or EMPTY,
        "Notes": r.get("notes") or EMPTY,
    }


def to_xlsx(records: Sequence[dict], *, sheet_name: str = EXPORT_SHEET_NAME) -> bytes:
    if not records:
        records = [{"No Data": "Tidak ada data untuk periode ini"}]
    df = pd.DataFrame(list(records))

    # Write into memory (nothing touches the disk).
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


class ExportService:
    """Monthly spreadsheet exports (employees, leave, attendance)."""

    def __init__(self, reports: ReportRepository, *, writer: Optional[Callable[[Sequence[dict]], bytes]] = None):
        self._reports = reports
        self._writer = writer or to_xlsx

    def build_records(self, export_type: ExportType, year: int, month: int) -> list[dict]:
        start = date(year, month, 1)
        end = date(year, month, calendar.monthrange(year, month)[1])
        if export_type == ExportType.EMPLOYEES:
            return [_employee_record(r) for r in self._reports.employee_rows()]
        if export_type == ExportType.LEAVE:
            return [_leave_record(r) for r in self._reports.leave_rows(start_date=start, end_date=end)]
        return [_attendance_record(r) for r in self._reports.attendance_rows(start_date=start, end_date=end)]

    def export(self, export_type: str, month: str) -> ExportFile:
        try:
            kind = ExportType((export_type or "").strip().lower())
        except ValueError:
            raise ValidationError("Jenis export tidak valid", details={"type": export_type})
        year, mon = parse_month(month)
        records = self.build_records(kind, year, mon)
        return ExportFile(filename=f"{kind.value}_report_{year:04d}-{mon:02d}.xlsx", content=self._writer(records))
