from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence


class ReportRepository(Protocol):
    """Flat read-models for spreadsheet exports (one dict per row)."""

    def employee_rows(self) -> Sequence[dict]:
        raise NotImplementedError

    def leave_rows(self, *, start_date: date, end_date: date) -> Sequence[dict]:
        raise NotImplementedError

    def attendance_rows(self, *, start_date: date, end_date: date) -> Sequence[dict]:
        raise NotImplementedError
