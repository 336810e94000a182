from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import mysql.connector
from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


class ApiJSONProvider(DefaultJSONProvider):
    """JSON encoder: Decimal -> number, date/datetime -> ISO 8601."""

    sort_keys = False

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, date):
            return o.isoformat()
        if is_dataclass(o) and not isinstance(o, type):
            return asdict(o)
        return DefaultJSONProvider.default(o)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Body harus berupa objek JSON")
    return data


def json_list_body(key: str) -> list:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        data = data.get(key)
    if not isinstance(data, list) or not data:
        raise ValidationError(f"{key} harus berupa array dan tidak boleh kosong", details={"field": key})
    return data


def error_payload(err: DomainError) -> dict:
    return {"error": err.message, "kind": err.kind, "details": err.details}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        if err.status_code >= 500:
            logger.error("Domain failure on %s %s: %s", request.method, request.path, err.message)
        return jsonify(error_payload(err)), err.status_code

    @app.errorhandler(mysql.connector.Error)
    def handle_db_error(err: mysql.connector.Error):
        logger.exception("Database error on %s %s", request.method, request.path)
        return jsonify({"error": "Kesalahan basis data", "kind": "internal", "details": {}}), 500

    @app.errorhandler(404)
    def handle_not_found(_err):
        return jsonify({"error": "Endpoint tidak ditemukan", "kind": "not_found", "details": {}}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(_err):
        return jsonify({"error": "Metode tidak diizinkan", "kind": "validation_error", "details": {}}), 405
