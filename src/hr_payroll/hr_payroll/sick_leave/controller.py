from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import current_user, hr_required, login_required
from ..common.http import json_body
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .storage import UploadedDocument


def _uploaded_document():
    file = request.files.get("file")
    if file is None or not file.filename:
        return None
    return UploadedDocument(filename=file.filename, content=file.read(), content_type=file.mimetype or "")


def register(app: Flask, container: Container) -> None:
    sick_leaves = container.sick_leave_service

    @app.route("/api/izin-sakit", methods=["POST"], endpoint="create_izin_sakit")
    @login_required
    def create_izin_sakit():
        user = current_user()
        form = request.form if request.form else json_body()
        employee_id = form.get("employee_id") or user.employee_id
        if employee_id is None:
            raise ValidationError("Data karyawan tidak ditemukan", details={"field": "employee_id"})
        if not user.is_hr and str(employee_id) != str(user.employee_id):
            raise AuthorizationError("Anda hanya dapat mengajukan izin untuk diri sendiri")
        item = sick_leaves.create(
            employee_id=employee_id,
            tanggal=form.get("tanggal"),
            jenis=form.get("jenis"),
            alasan=form.get("alasan"),
            document=_uploaded_document(),
        )
        return jsonify(item.to_dict()), 201

    @app.route("/api/izin-sakit", methods=["GET"], endpoint="list_izin_sakit")
    @login_required
    def list_izin_sakit():
        user = current_user()
        employee_id = request.args.get("employee_id", type=int) if user.is_hr else user.employee_id
        if employee_id is None:
            if user.is_hr:
                raise ValidationError("employee_id wajib diisi", details={"field": "employee_id"})
            return jsonify([])
        return jsonify([s.to_dict() for s in sick_leaves.list_for_employee(employee_id)])

    @app.route("/api/izin-sakit-all", methods=["GET"], endpoint="list_all_izin_sakit")
    @hr_required
    def list_all_izin_sakit():
        return jsonify([s.to_dict() for s in sick_leaves.list_all(status=request.args.get("status"))])

    @app.route("/api/izin-sakit/<int:sick_leave_id>/approve", methods=["PUT"], endpoint="approve_izin_sakit")
    @hr_required
    def approve_izin_sakit(sick_leave_id: int):
        item = sick_leaves.approve(
            sick_leave_id, user_id=current_user().user_id, keterangan=json_body().get("keterangan")
        )
        return jsonify(item.to_dict())

    @app.route("/api/izin-sakit/<int:sick_leave_id>/reject", methods=["PUT"], endpoint="reject_izin_sakit")
    @hr_required
    def reject_izin_sakit(sick_leave_id: int):
        item = sick_leaves.reject(
            sick_leave_id, user_id=current_user().user_id, keterangan=json_body().get("keterangan")
        )
        return jsonify(item.to_dict())
