from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import current_user, hr_required, login_required
from ..common.http import json_body, json_list_body
from ..core.exceptions import AuthorizationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    salaries = container.salary_service

    @app.route("/api/salary", methods=["GET"], endpoint="list_salaries")
    @hr_required
    def list_salaries():
        return jsonify(list(salaries.list_salaries()))

    @app.route("/api/salary/employee/<int:employee_id>", methods=["GET"], endpoint="employee_salary")
    @login_required
    def employee_salary(employee_id: int):
        user = current_user()
        if not user.is_hr and user.employee_id != employee_id:
            raise AuthorizationError("Anda hanya dapat melihat gaji sendiri")
        return jsonify(salaries.get_for_employee(employee_id).to_dict())

    @app.route("/api/salary", methods=["POST"], endpoint="create_salary")
    @hr_required
    def create_salary():
        return jsonify(salaries.create(json_body()).to_dict()), 201

    @app.route("/api/salary/<int:salary_id>", methods=["PUT"], endpoint="update_salary")
    @hr_required
    def update_salary(salary_id: int):
        return jsonify(salaries.update(salary_id, json_body()).to_dict())

    @app.route("/api/salary/<int:salary_id>", methods=["DELETE"], endpoint="delete_salary")
    @hr_required
    def delete_salary(salary_id: int):
        salaries.delete(salary_id)
        return jsonify({"message": "Data gaji berhasil dihapus"})

    @app.route("/api/salary/bulk-upload", methods=["POST"], endpoint="bulk_upload_salaries")
    @hr_required
    def bulk_upload_salaries():
        result = salaries.bulk_upload(json_list_body("salaries"))
        return jsonify(result), (200 if result["error_count"] == 0 else 207)
