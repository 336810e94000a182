from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import hr_required, login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    nik = container.nik_service

    @app.route("/api/department-nik-configs", methods=["GET"], endpoint="list_nik_configs")
    @hr_required
    def list_nik_configs():
        return jsonify([c.to_dict() for c in nik.list_configs()])

    @app.route("/api/department-nik-configs/<department_name>/active", methods=["GET"], endpoint="active_nik_config")
    @login_required
    def active_nik_config(department_name: str):
        return jsonify(nik.get_active_config(department_name).to_dict())

    @app.route("/api/department-nik-configs/check/<department_name>", methods=["GET"], endpoint="check_nik_config")
    @login_required
    def check_nik_config(department_name: str):
        return jsonify(nik.check(department_name))

    @app.route("/api/department-nik-configs", methods=["POST"], endpoint="create_nik_config")
    @hr_required
    def create_nik_config():
        data = json_body()
        cfg = nik.create_config(
            department_id=data.get("department_id"),
            prefix=data.get("prefix"),
            current_sequence=data.get("current_sequence"),
            sequence_length=data.get("sequence_length"),
            format_pattern=data.get("format_pattern"),
            is_active=data.get("is_active", True),
        )
        return jsonify(cfg.to_dict()), 201

    @app.route("/api/department-nik-configs/<int:config_id>", methods=["PUT"], endpoint="update_nik_config")
    @hr_required
    def update_nik_config(config_id: int):
        return jsonify(nik.update_config(config_id, json_body()).to_dict())

    @app.route("/api/department-nik-configs/<int:config_id>", methods=["DELETE"], endpoint="delete_nik_config")
    @hr_required
    def delete_nik_config(config_id: int):
        nik.delete_config(config_id)
        return jsonify({"message": "Konfigurasi NIK berhasil dihapus"})

    @app.route(
        "/api/department-nik-configs/<department_name>/generate-next",
        methods=["POST"],
        endpoint="generate_next_nik",
    )
    @hr_required
    def generate_next_nik(department_name: str):
        issued = nik.generate_next_for_department_name(department_name)
        return jsonify({"nik": issued.nik, "config": issued.config.to_dict()})

    @app.route("/api/department-nik-configs/validate-format", methods=["POST"], endpoint="validate_nik_format")
    @login_required
    def validate_nik_format():
        data = json_body()
        return jsonify(nik.validate_format(data.get("nik_input"), data.get("department_name")))
