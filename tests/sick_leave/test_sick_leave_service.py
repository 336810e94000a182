from __future__ import annotations

from datetime import date

import pytest

from src.hr_payroll.hr_payroll.core.enums import RequestStatus, SickLeaveKind
from src.hr_payroll.hr_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.hr_payroll.hr_payroll.sick_leave.service import SickLeaveService
from src.hr_payroll.hr_payroll.sick_leave.storage import LocalDocumentStorage, UploadedDocument


class RecordingStorage:
    def __init__(self, fail=False):
        self.saved = []
        self.fail = fail

    def save(self, *, key, document):
        if self.fail:
            raise OSError("disk full")
        self.saved.append((key, document.filename))
        return f"{key}.{document.extension}"


@pytest.fixture
def employee(employees):
    return employees.add(first_name="Budi", nik="OPS001")


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def service(sick_leaves, employees, storage, fixed_now):
    return SickLeaveService(sick_leaves, employees, storage, now=lambda: fixed_now)


def test_request_without_file_gets_placeholder_path(service, employee, storage, fixed_now):
    item = service.create(employee_id=employee.employee_id, tanggal="2026-03-03", jenis="Sakit", alasan="Demam")

    assert item.jenis == SickLeaveKind.SAKIT
    assert item.status == RequestStatus.PENDING
    assert item.file_path == f"no-file-{int(fixed_now.timestamp() * 1000)}"
    assert item.has_document is False
    assert storage.saved == []


def test_request_with_file_is_stored(service, employee, storage):
    doc = UploadedDocument(filename="surat dokter.JPG", content=b"\xff\xd8data")

    item = service.create(employee_id=employee.employee_id, tanggal="2026-03-04", jenis="izin", alasan="Kontrol", document=doc)

    assert item.has_document is True
    assert item.file_path.startswith(f"izin-sakit/{employee.employee_id}-")
    assert item.file_path.endswith(".jpg")
    assert len(storage.saved) == 1


def test_storage_failure_keeps_request(sick_leaves, employees, employee, fixed_now):
    service = SickLeaveService(sick_leaves, employees, RecordingStorage(fail=True), now=lambda: fixed_now)
    doc = UploadedDocument(filename="a.png", content=b"png")

    item = service.create(employee_id=employee.employee_id, tanggal="2026-03-04", jenis="sakit", alasan="Flu", document=doc)

    assert item.has_document is False


def test_one_request_per_day(service, employee):
    service.create(employee_id=employee.employee_id, tanggal="2026-03-05", jenis="sakit", alasan="Flu")
    with pytest.raises(ConflictError):
        service.create(employee_id=employee.employee_id, tanggal=date(2026, 3, 5), jenis="izin", alasan="Lain")


def test_invalid_input(service, employee):
    with pytest.raises(ValidationError):
        service.create(employee_id=employee.employee_id, tanggal="2026-03-05", jenis="cuti", alasan="x")
    with pytest.raises(ValidationError):
        service.create(employee_id=employee.employee_id, tanggal="05-03-2026", jenis="sakit", alasan="x")
    with pytest.raises(NotFoundError):
        service.create(employee_id=999, tanggal="2026-03-05", jenis="sakit", alasan="x")


def test_decision_only_once(service, employee, fixed_now):
    item = service.create(employee_id=employee.employee_id, tanggal="2026-03-06", jenis="sakit", alasan="Flu")

    approved = service.approve(item.sick_leave_id, user_id=1, keterangan="Semoga lekas sembuh")
    assert approved.status == RequestStatus.APPROVED
    assert approved.approved_by == 1
    assert approved.approved_at == fixed_now
    assert approved.keterangan == "Semoga lekas sembuh"

    with pytest.raises(ValidationError):
        service.reject(item.sick_leave_id, user_id=1)


def test_list_all_filters_status(service, employee):
    first = service.create(employee_id=employee.employee_id, tanggal="2026-03-06", jenis="sakit", alasan="Flu")
    service.create(employee_id=employee.employee_id, tanggal="2026-03-07", jenis="sakit", alasan="Flu")
    service.reject(first.sick_leave_id, user_id=1)

    assert [s.sick_leave_id for s in service.list_all(status="rejected")] == [first.sick_leave_id]
    assert len(service.list_all()) == 2
    with pytest.raises(ValidationError):
        service.list_all(status="DONE")


def test_local_storage_validates_type_and_size(tmp_path):
    storage = LocalDocumentStorage(tmp_path, max_bytes=10)

    path = storage.save(key="izin-sakit/1-1", document=UploadedDocument(filename="bukti.png", content=b"12345"))
    assert path == "izin-sakit/1-1.png"
    assert (tmp_path / path).read_bytes() == b"12345"

    with pytest.raises(ValidationError):
        storage.save(key="k", document=UploadedDocument(filename="bukti.pdf", content=b"1"))
    with pytest.raises(ValidationError):
        storage.save(key="k", document=UploadedDocument(filename="bukti.jpg", content=b"x" * 11))
