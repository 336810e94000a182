from __future__ import annotations

import mysql.connector

from src.hr_payroll.hr_payroll.system.service import SystemService


class FakeSystemRepo:
    def __init__(self, down=False):
        self.down = down

    def ping(self):
        if self.down:
            raise mysql.connector.Error(msg="Can't connect")

    def table_counts(self):
        return {"employees": 3, "departments": 2}

    def list_settings(self):
        return []


def test_health_reports_environment(fixed_now):
    payload = SystemService(FakeSystemRepo(), environment="testing", now=lambda: fixed_now).health()
    assert payload == {"status": "ok", "timestamp": fixed_now, "environment": "testing"}


def test_database_health_up_and_down(fixed_now):
    payload, healthy = SystemService(FakeSystemRepo(), environment="testing", now=lambda: fixed_now).database_health()
    assert healthy is True
    assert payload["counts"] == {"employees": 3, "departments": 2}

    payload, healthy = SystemService(FakeSystemRepo(down=True), environment="testing").database_health()
    assert healthy is False
    assert payload["database"] == "disconnected"
