from __future__ import annotations

from datetime import date

import pytest

from src.hr_payroll.hr_payroll.attendance.service import AttendanceService
from src.hr_payroll.hr_payroll.core.exceptions import ValidationError


class FakeAttendanceRepo:
    def __init__(self):
        self.queries = []

    def list(self, *, employee_id=None, on_date=None, start_date=None, end_date=None):
        self.queries.append({"employee_id": employee_id, "on_date": on_date})
        return []


def test_filters_are_parsed():
    repo = FakeAttendanceRepo()
    AttendanceService(repo).list_records(employee_id="4", on_date="2026-03-02")
    AttendanceService(repo).list_records()

    assert repo.queries == [
        {"employee_id": 4, "on_date": date(2026, 3, 2)},
        {"employee_id": None, "on_date": None},
    ]


def test_bad_date_is_rejected():
    with pytest.raises(ValidationError):
        AttendanceService(FakeAttendanceRepo()).list_records(on_date="kemarin")
