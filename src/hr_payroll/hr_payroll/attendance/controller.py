from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import current_user, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance-records", methods=["GET"], endpoint="attendance_records")
    @login_required
    def attendance_records():
        user = current_user()
        employee_id = request.args.get("employee_id") if user.is_hr else user.employee_id
        if not user.is_hr and employee_id is None:
            return jsonify([])
        records = container.attendance_service.list_records(employee_id=employee_id, on_date=request.args.get("date"))
        return jsonify([r.to_dict() for r in records])
