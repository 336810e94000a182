from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus, SickLeaveKind


@dataclass(frozen=True)
class SickLeave:
    """Pengajuan izin/sakit satu hari, dengan bukti dokumen opsional."""

    sick_leave_id: int
    employee_id: int
    tanggal: date
    jenis: SickLeaveKind
    alasan: str
    file_path: str
    status: RequestStatus
    keterangan: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None

    @property
    def has_document(self) -> bool:
        return not self.file_path.startswith("no-file-")

    def to_dict(self) -> dict:
        data = asdict(self)
        data["id"] = data.pop("sick_leave_id")
        data["status"] = self.status.value
        data["jenis"] = self.jenis.value
        data["has_document"] = self.has_document
        return data
