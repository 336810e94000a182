from __future__ import annotations

import io

from flask import Flask, send_file

from ..common.auth import hr_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/export/<export_type>", methods=["POST"], endpoint="export_report")
    @hr_required
    def export_report(export_type: str):
        exported = container.export_service.export(export_type, json_body().get("month"))
        return send_file(
            io.BytesIO(exported.content),
            mimetype=exported.mimetype,
            as_attachment=True,
            download_name=exported.filename,
        )
