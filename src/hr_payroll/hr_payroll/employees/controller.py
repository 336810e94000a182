from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import current_user, hr_required, login_required
from ..common.http import json_body, json_list_body
from ..core.exceptions import AuthorizationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @hr_required
    def list_employees():
        return jsonify([e.to_dict() for e in employees.list_employees()])

    @app.route("/api/employees/me", methods=["GET"], endpoint="my_employee")
    @login_required
    def my_employee():
        return jsonify(employees.get_by_user(current_user().user_id).to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @login_required
    def get_employee(employee_id: int):
        user = current_user()
        if not user.is_hr and user.employee_id != employee_id:
            raise AuthorizationError("Anda hanya dapat melihat data diri sendiri")
        return jsonify(employees.get(employee_id).to_dict())

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @hr_required
    def create_employee():
        return jsonify(employees.create(json_body()).to_dict()), 201

    @app.route("/api/employees/bulk", methods=["POST"], endpoint="bulk_employees")
    @hr_required
    def bulk_employees():
        result = employees.bulk_import(json_list_body("employees"))
        return jsonify(result), (200 if result["error_count"] == 0 else 207)

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    @hr_required
    def update_employee(employee_id: int):
        return jsonify(employees.update(employee_id, json_body()).to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @hr_required
    def delete_employee(employee_id: int):
        employees.delete(employee_id)
        return jsonify({"message": "Karyawan berhasil dihapus"})
