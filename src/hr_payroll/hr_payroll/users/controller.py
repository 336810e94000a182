from __future__ import annotations

import hmac
from datetime import timedelta

from flask import Flask, current_app, jsonify, request, session

from ..common.auth import admin_required, current_user, hr_required, login_required
from ..common.http import json_body, json_list_body
from ..core.exceptions import AuthenticationError, InternalError
from ..container import Container


def _check_admin_secret() -> None:
    secret = current_app.config.get("ADMIN_SECRET")
    if not secret:
        raise InternalError("Admin secret tidak terkonfigurasi")
    header = request.headers.get("Authorization", "")
    if not hmac.compare_digest(header, f"Bearer {secret}"):
        raise AuthenticationError("Unauthorized")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=30)

        session["user_id"] = s_user.user_id
        session["role"] = s_user.role.value
        session["employee_id"] = s_user.employee_id
        return jsonify({"user": s_user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def register_user():
        user = container.user_service.register(json_body())
        return jsonify({"message": "Registrasi berhasil", "user": {"id": user.user_id, "email": user.email}}), 201

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        s_user = container.auth_service.session_user(current_user().user_id)
        return jsonify({"user": s_user.to_dict()})

    @app.route("/api/admin-create-user", methods=["POST"], endpoint="admin_create_user")
    def admin_create_user():
        _check_admin_secret()
        user = container.user_service.admin_create(json_body())
        return jsonify({"message": "User berhasil dibuat", "user": user.to_dict()}), 201

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @hr_required
    def list_users():
        return jsonify([u.to_dict() for u in container.user_service.list_users()])

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="get_user")
    @hr_required
    def get_user(user_id: int):
        return jsonify(container.user_service.get(user_id).to_dict())

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @admin_required
    def update_user(user_id: int):
        return jsonify(container.user_service.update(user_id, json_body()).to_dict())

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: int):
        container.user_service.delete(user_id)
        return jsonify({"message": "User berhasil dihapus"})

    @app.route("/api/users/bulk", methods=["POST"], endpoint="bulk_users")
    @admin_required
    def bulk_users():
        result = container.user_service.bulk_create(json_list_body("users"))
        return jsonify(result), (200 if result["error_count"] == 0 else 207)
