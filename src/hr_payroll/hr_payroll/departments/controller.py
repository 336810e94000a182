from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import hr_required, login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    @login_required
    def list_departments():
        return jsonify([d.to_dict() for d in container.department_service.list_departments()])

    @app.route("/api/departments", methods=["POST"], endpoint="create_department")
    @hr_required
    def create_department():
        dept = container.department_service.create(name=json_body().get("name"))
        return jsonify(dept.to_dict()), 201

    @app.route("/api/departments/<int:department_id>", methods=["PUT"], endpoint="rename_department")
    @hr_required
    def rename_department(department_id: int):
        dept = container.department_service.rename(department_id, name=json_body().get("name"))
        return jsonify(dept.to_dict())

    @app.route("/api/departments/<int:department_id>", methods=["DELETE"], endpoint="delete_department")
    @hr_required
    def delete_department(department_id: int):
        container.department_service.delete(department_id)
        return jsonify({"message": "Departemen berhasil dihapus"})
