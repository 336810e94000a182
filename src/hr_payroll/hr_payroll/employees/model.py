from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Entitas domain: Karyawan.

    Catatan: objek data murni (tanpa akses DB).
    """

    employee_id: int
    first_name: str
    last_name: str
    email: str
    position: str
    hire_date: date
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    user_id: Optional[int] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    nik: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["id"] = data.pop("employee_id")
        data["full_name"] = self.full_name
        return data


@dataclass(frozen=True)
class NewEmployee:
    first_name: str
    last_name: str
    email: str
    position: str
    hire_date: date
    department_id: Optional[int]
    nik: Optional[str]
    user_id: Optional[int] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None
