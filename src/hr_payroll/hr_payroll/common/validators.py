from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import InvalidAmountError, ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} wajib diisi", details={"field": field_name})
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} minimal {min_len} karakter", details={"field": field_name})
    return value


def optional_str(value: Any) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    return text or None


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} tidak valid", details={"field": field_name})
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} tidak valid", details={"field": field_name, "value": value})


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return require_int(value, field_name)


def parse_amount(value: Any, field_name: str) -> Decimal:
    """Parse a monetary value into a finite Decimal.

    Accepts int, float, Decimal and numeric strings. Booleans, NaN, infinities
    and unparsable strings raise :class:`InvalidAmountError` instead of being
    coerced to zero.
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmountError(f"{field_name} harus berupa angka", details={"field": field_name, "value": value})
    try:
        if isinstance(value, float):
            amount = Decimal(repr(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"{field_name} harus berupa angka", details={"field": field_name, "value": value})
    if not amount.is_finite():
        raise InvalidAmountError(f"{field_name} harus berupa angka", details={"field": field_name, "value": str(value)})
    return amount


def parse_optional_amount(value: Any, field_name: str, *, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Empty values (None, "") map to ``default``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return parse_amount(value, field_name)


def require_non_negative(amount: Optional[Decimal], field_name: str) -> Optional[Decimal]:
    if amount is not None and amount < 0:
        raise InvalidAmountError(f"{field_name} tidak boleh negatif", details={"field": field_name})
    return amount


def require_positive(amount: Decimal, field_name: str) -> Decimal:
    if amount <= 0:
        raise InvalidAmountError(f"{field_name} harus lebih dari 0", details={"field": field_name})
    return amount


_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def parse_bool(value: Any, field_name: str) -> bool:
    """Booleans, 0/1 and the usual true/false words; anything else is rejected."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower() if isinstance(value, str) else None
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValidationError(f"{field_name} harus berupa boolean", details={"field": field_name, "value": value})
