from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import parse_date_field
from ..common.validators import optional_str, require_int, require_non_empty
from ..core.enums import RequestStatus, SickLeaveKind
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import SickLeave
from .repository import SickLeaveRepository
from .storage import DocumentStorage, UploadedDocument

logger = logging.getLogger(__name__)


class SickLeaveService:
    """Use cases: izin/sakit requests and their approval."""

    def __init__(
        self,
        sick_leaves: SickLeaveRepository,
        employees: EmployeeRepository,
        storage: DocumentStorage,
        *,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._sick_leaves = sick_leaves
        self._employees = employees
        self._storage = storage
        self._now = now or datetime.now

    def _store_document(self, employee_id: int, document: Optional[UploadedDocument]) -> str:
        ts = int(self._now().timestamp() * 1000)
        if document is None or not document.content:
            return f"no-file-{ts}"
        try:
            return self._storage.save(key=f"izin-sakit/{employee_id}-{ts}", document=document)
        except OSError:
            logger.warning("Document store failed for employee %s, keeping request without file", employee_id, exc_info=True)
            return f"no-file-{ts}"

    def create(
        self,
        *,
        employee_id: Any,
        tanggal: Any,
        jenis: Any,
        alasan: Any,
        document: Optional[UploadedDocument] = None,
    ) -> SickLeave:
        employee_id = require_int(employee_id, "Karyawan")
        day = parse_date_field(tanggal, "Tanggal")
        try:
            kind = SickLeaveKind(str(jenis or "").strip().lower())
        except ValueError:
            raise ValidationError("Jenis harus 'izin' atau 'sakit'", details={"field": "jenis"})
        alasan = require_non_empty(alasan, "Alasan")

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Karyawan tidak ditemukan", details={"employee_id": employee_id})
        if self._sick_leaves.exists_for_date(employee_id, day):
            raise ConflictError(
                "Pengajuan izin/sakit untuk tanggal ini sudah ada",
                details={"employee_id": employee_id, "tanggal": day.isoformat()},
            )

        file_path = self._store_document(employee_id, document)
        new_id = self._sick_leaves.create(
            employee_id=employee_id, tanggal=day, jenis=kind, alasan=alasan, file_path=file_path
        )
        return self.get(new_id)

    def get(self, sick_leave_id: int) -> SickLeave:
        item = self._sick_leaves.get_by_id(int(sick_leave_id))
        if not item:
            raise NotFoundError("Pengajuan izin/sakit tidak ditemukan", details={"id": sick_leave_id})
        return item

    def list_for_employee(self, employee_id: int) -> Sequence[SickLeave]:
        return self._sick_leaves.list(employee_id=int(employee_id))

    def list_all(self, *, status: Optional[str] = None) -> Sequence[SickLeave]:
        parsed = None
        if status:
            try:
                parsed = RequestStatus(status.strip().upper())
            except ValueError:
                raise ValidationError("Status tidak valid", details={"field": "status"})
        return self._sick_leaves.list(status=parsed)

    def _decide(self, sick_leave_id: int, status: RequestStatus, *, user_id: int, keterangan: Any) -> SickLeave:
        item = self.get(sick_leave_id)
        if item.status != RequestStatus.PENDING:
            raise ValidationError("Pengajuan sudah diproses", details={"status": item.status.value})
        now = self._now()
        changes: dict[str, Any] = {"status": status.value, "keterangan": optional_str(keterangan)}
        if status == RequestStatus.APPROVED:
            changes.update(approved_by=user_id, approved_at=now)
        else:
            changes.update(rejected_by=user_id, rejected_at=now)
        if not self._sick_leaves.decide(item.sick_leave_id, changes):
            raise ConflictError("Pengajuan sudah diproses oleh pengguna lain")
        return self.get(item.sick_leave_id)

    def approve(self, sick_leave_id: int, *, user_id: int, keterangan: Any = None) -> SickLeave:
        return self._decide(sick_leave_id, RequestStatus.APPROVED, user_id=user_id, keterangan=keterangan)

    def reject(self, sick_leave_id: int, *, user_id: int, keterangan: Any = None) -> SickLeave:
        return self._decide(sick_leave_id, RequestStatus.REJECTED, user_id=user_id, keterangan=keterangan)
