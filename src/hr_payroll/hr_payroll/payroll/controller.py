from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import current_user, hr_required, login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    components = container.payroll_component_service
    payrolls = container.payroll_service

    # Payroll components

    @app.route("/api/payroll-components", methods=["GET"], endpoint="list_payroll_components")
    @login_required
    def list_payroll_components():
        return jsonify([c.to_dict() for c in components.list_components()])

    @app.route("/api/payroll-components/active", methods=["GET"], endpoint="active_payroll_components")
    @login_required
    def active_payroll_components():
        return jsonify([c.to_dict() for c in components.list_active()])

    @app.route("/api/payroll-components/stats", methods=["GET"], endpoint="payroll_component_stats")
    @hr_required
    def payroll_component_stats():
        return jsonify(components.stats())

    @app.route("/api/payroll-components/<int:component_id>", methods=["GET"], endpoint="get_payroll_component")
    @login_required
    def get_payroll_component(component_id: int):
        return jsonify(components.get(component_id).to_dict())

    @app.route("/api/payroll-components", methods=["POST"], endpoint="create_payroll_component")
    @hr_required
    def create_payroll_component():
        return jsonify(components.create(json_body()).to_dict()), 201

    @app.route("/api/payroll-components/<int:component_id>", methods=["PUT"], endpoint="update_payroll_component")
    @hr_required
    def update_payroll_component(component_id: int):
        return jsonify(components.update(component_id, json_body()).to_dict())

    @app.route("/api/payroll-components/<int:component_id>", methods=["DELETE"], endpoint="delete_payroll_component")
    @hr_required
    def delete_payroll_component(component_id: int):
        components.delete(component_id)
        return jsonify({"message": "Komponen gaji berhasil dihapus"})

    @app.route(
        "/api/payroll-components/<int:component_id>/toggle",
        methods=["PATCH"],
        endpoint="toggle_payroll_component",
    )
    @hr_required
    def toggle_payroll_component(component_id: int):
        return jsonify(components.toggle(component_id).to_dict())

    # Payrolls

    @app.route("/api/payrolls/calculate", methods=["POST"], endpoint="calculate_payroll")
    @hr_required
    def calculate_payroll():
        data = json_body()
        breakdown = payrolls.calculate(
            employee_id=data.get("employee_id"),
            basic_salary_input=data.get("basic_salary"),
            manual_deductions=data.get("manual_deductions"),
        )
        return jsonify(breakdown.to_dict())

    @app.route("/api/payrolls", methods=["GET"], endpoint="list_payrolls")
    @login_required
    def list_payrolls():
        user = current_user()
        employee_id = request.args.get("employee_id") if user.is_hr else user.employee_id
        if not user.is_hr and employee_id is None:
            return jsonify([])
        items = payrolls.list_payrolls(employee_id=employee_id, status=request.args.get("status"))
        return jsonify([p.to_dict() for p in items])

    @app.route("/api/payrolls/<int:payroll_id>", methods=["GET"], endpoint="get_payroll")
    @login_required
    def get_payroll(payroll_id: int):
        user = current_user()
        scope = None if user.is_hr else (user.employee_id if user.employee_id is not None else -1)
        return jsonify(payrolls.get(payroll_id, employee_scope=scope).to_dict())

    @app.route("/api/payrolls", methods=["POST"], endpoint="create_payroll")
    @hr_required
    def create_payroll():
        payroll = payrolls.create(json_body(), created_by=current_user().user_id)
        return jsonify(payroll.to_dict()), 201

    @app.route("/api/payrolls/<int:payroll_id>", methods=["PUT"], endpoint="update_payroll")
    @hr_required
    def update_payroll(payroll_id: int):
        return jsonify(payrolls.update(payroll_id, json_body()).to_dict())

    @app.route("/api/payrolls/<int:payroll_id>/status", methods=["PATCH"], endpoint="update_payroll_status")
    @hr_required
    def update_payroll_status(payroll_id: int):
        payroll = payrolls.update_status(payroll_id, json_body().get("status"), user_id=current_user().user_id)
        return jsonify(payroll.to_dict())

    @app.route("/api/payrolls/<int:payroll_id>", methods=["DELETE"], endpoint="delete_payroll")
    @hr_required
    def delete_payroll(payroll_id: int):
        payrolls.delete(payroll_id)
        return jsonify({"message": "Payroll berhasil dihapus"})
