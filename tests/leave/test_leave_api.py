from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest
from flask import Flask

from src.hr_payroll.hr_payroll.common.http import ApiJSONProvider, register_error_handlers
from src.hr_payroll.hr_payroll.core.enums import RequestStatus
from src.hr_payroll.hr_payroll.leave.controller import register
from src.hr_payroll.hr_payroll.leave.notifications import NotificationService
from src.hr_payroll.hr_payroll.leave.service import LeaveQuotaService, LeaveService


@pytest.fixture
def app(leave_requests, leave_quotas, sick_leaves, employees, today, fixed_now):
    employees.add(first_name="Budi", user_id=10)
    employees.add(first_name="Sari", user_id=11)
    container = SimpleNamespace(
        leave_service=LeaveService(
            leave_requests, leave_quotas, employees, today=lambda: today, now=lambda: fixed_now
        ),
        leave_quota_service=LeaveQuotaService(leave_quotas, employees),
        notification_service=NotificationService(leave_requests, sick_leaves),
    )
    app = Flask(__name__)
    app.json_provider_class = ApiJSONProvider
    app.json = ApiJSONProvider(app)
    app.config.update(SECRET_KEY="test", TESTING=True)
    register_error_handlers(app)
    register(app, container)
    return app


def _login(client, *, user_id, role, employee_id):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
        sess["employee_id"] = employee_id


@pytest.fixture
def staff(app):
    client = app.test_client()
    _login(client, user_id=10, role="karyawan", employee_id=1)
    return client


@pytest.fixture
def hrd(app):
    client = app.test_client()
    _login(client, user_id=1, role="hrd", employee_id=None)
    return client


def test_overlap_returns_conflict(staff, leave_requests):
    leave_requests.add(1, date(2026, 3, 5), date(2026, 3, 10), status=RequestStatus.APPROVED)

    resp = staff.post(
        "/api/leave-requests",
        json={"leave_type": "tahunan", "reason": "Liburan", "start_date": "2026-03-08", "end_date": "2026-03-12"},
    )
    assert resp.status_code == 409
    assert resp.get_json()["details"]["status"] == "APPROVED"

    resp = staff.post(
        "/api/leave-requests",
        json={"leave_type": "tahunan", "reason": "Liburan", "start_date": "2026-03-11", "end_date": "2026-03-15"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["employee_id"] == 1
    assert body["days"] == 5
    assert body["start_date"] == "2026-03-11"


def test_staff_only_sees_own_requests(staff, leave_requests):
    own = leave_requests.add(1, date(2026, 3, 9), date(2026, 3, 10))
    other = leave_requests.add(2, date(2026, 3, 9), date(2026, 3, 10))

    assert [r["id"] for r in staff.get("/api/leave-requests?employee_id=2").get_json()] == [own.request_id]
    assert staff.get(f"/api/leave-requests/{other.request_id}").status_code == 403


def test_only_hr_decides(staff, hrd, leave_requests, leave_quotas):
    quota_id = leave_quotas.create(employee_id=1, year=2026, quota_type="tahunan", total_quota=12, used_quota=0)
    req = leave_requests.add(1, date(2026, 3, 9), date(2026, 3, 11))

    assert staff.put(f"/api/leave-requests/{req.request_id}", json={"status": "APPROVED"}).status_code == 403

    resp = hrd.put(f"/api/leave-requests/{req.request_id}", json={"status": "APPROVED"})
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "APPROVED"
    assert leave_quotas.get_by_id(quota_id).used_quota == 3


def test_my_quotas(staff, leave_quotas):
    leave_quotas.create(employee_id=1, year=2026, quota_type="tahunan", total_quota=12, used_quota=2)
    leave_quotas.create(employee_id=2, year=2026, quota_type="tahunan", total_quota=12, used_quota=0)

    body = staff.get("/api/leave-quotas/me").get_json()
    assert [(q["employee_id"], q["remaining_quota"]) for q in body] == [(1, 10)]


def test_anonymous_is_rejected(app):
    assert app.test_client().get("/api/leave-requests").status_code == 401
