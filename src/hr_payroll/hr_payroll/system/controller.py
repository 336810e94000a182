from __future__ import annotations

from flask import Flask, jsonify

from ..common.auth import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify(container.system_service.health())

    @app.route("/api/health/db", methods=["GET"], endpoint="health_db")
    def health_db():
        payload, healthy = container.system_service.database_health()
        return jsonify(payload), (200 if healthy else 500)

    @app.route("/api/system-settings", methods=["GET"], endpoint="system_settings")
    @login_required
    def system_settings():
        return jsonify([s.to_dict() for s in container.system_service.list_settings()])
