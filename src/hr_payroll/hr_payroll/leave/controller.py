from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import current_user, hr_required, login_required
from ..common.http import json_body
from ..core.exceptions import AuthorizationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    leaves = container.leave_service
    quotas = container.leave_quota_service

    @app.route("/api/leave-requests", methods=["GET"], endpoint="list_leave_requests")
    @login_required
    def list_leave_requests():
        user = current_user()
        employee_id = request.args.get("employee_id") if user.is_hr else user.employee_id
        if not user.is_hr and employee_id is None:
            return jsonify([])
        items = leaves.list_requests(employee_id=employee_id, status=request.args.get("status"))
        return jsonify([r.to_dict() for r in items])

    @app.route("/api/leave-requests/<int:request_id>", methods=["GET"], endpoint="get_leave_request")
    @login_required
    def get_leave_request(request_id: int):
        user = current_user()
        req = leaves.get(request_id)
        if not user.is_hr and req.employee_id != user.employee_id:
            raise AuthorizationError("Anda hanya dapat melihat pengajuan sendiri")
        return jsonify(req.to_dict())

    @app.route("/api/leave-requests", methods=["POST"], endpoint="create_leave_request")
    @login_required
    def create_leave_request():
        return jsonify(leaves.create(json_body(), user=current_user()).to_dict()), 201

    @app.route("/api/leave-requests/<int:request_id>", methods=["PUT"], endpoint="decide_leave_request")
    @hr_required
    def decide_leave_request(request_id: int):
        return jsonify(leaves.decide(request_id, json_body(), user=current_user()).to_dict())

    @app.route("/api/leave-requests/<int:request_id>", methods=["DELETE"], endpoint="delete_leave_request")
    @hr_required
    def delete_leave_request(request_id: int):
        leaves.delete(request_id)
        return jsonify({"message": "Pengajuan cuti berhasil dihapus"})

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications")
    @login_required
    def notifications():
        return jsonify(container.notification_service.for_user(current_user()))

    # Quotas

    @app.route("/api/leave-quotas", methods=["GET"], endpoint="list_leave_quotas")
    @hr_required
    def list_leave_quotas():
        items = quotas.list_quotas(
            employee_id=request.args.get("employee_id"),
            year=request.args.get("year"),
            quota_type=request.args.get("quota_type"),
        )
        return jsonify([q.to_dict() for q in items])

    @app.route("/api/leave-quotas/me", methods=["GET"], endpoint="my_leave_quotas")
    @login_required
    def my_leave_quotas():
        items = quotas.my_quotas(current_user().employee_id, year=request.args.get("year"))
        return jsonify([q.to_dict() for q in items])

    @app.route("/api/leave-quotas", methods=["POST"], endpoint="create_leave_quota")
    @hr_required
    def create_leave_quota():
        return jsonify(quotas.create(json_body()).to_dict()), 201

    @app.route("/api/leave-quotas/<int:quota_id>", methods=["PUT"], endpoint="update_leave_quota")
    @hr_required
    def update_leave_quota(quota_id: int):
        return jsonify(quotas.update(quota_id, json_body()).to_dict())

    @app.route("/api/leave-quotas/<int:quota_id>", methods=["DELETE"], endpoint="delete_leave_quota")
    @hr_required
    def delete_leave_quota(quota_id: int):
        quotas.delete(quota_id)
        return jsonify({"message": "Kuota cuti berhasil dihapus"})
