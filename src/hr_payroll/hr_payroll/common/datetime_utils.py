from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

from ..core.constants import BUSINESS_TIMEZONE
from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    A trailing ISO time part (``T...``) is ignored; any other extra text is rejected.
    """
    return datetime.strptime(value.split("T", 1)[0], "%Y-%m-%d").date()


def parse_date_field(value: Any, field_name: str) -> date:
    """Like :func:`parse_iso_date` but accepts date objects and raises ValidationError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value or "").strip())
    except ValueError:
        raise ValidationError(
            f"{field_name} tidak valid (format YYYY-MM-DD)",
            details={"field": field_name, "value": value},
        )


def parse_flexible_date(value: Any) -> Optional[date]:
    """Parse spreadsheet-style dates: YYYY-MM-DD or DD/MM/YYYY.

    Empty values return None; anything else that cannot be parsed raises ValueError.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if "/" in text:
        return datetime.strptime(text, "%d/%m/%Y").date()
    return parse_iso_date(text)


def parse_month(value: str) -> tuple[int, int]:
    """Parse ``YYYY-MM`` into (year, month)."""
    m = _MONTH_RE.match((value or "").strip())
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise ValidationError("Format bulan tidak valid (YYYY-MM)", details={"field": "month", "value": value})
    return int(m.group(1)), int(m.group(2))


def now_local(tz_name: str = BUSINESS_TIMEZONE) -> datetime:
    """Current time in the business timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(ZoneInfo(tz_name))


def today_in(tz_name: str = BUSINESS_TIMEZONE) -> date:
    return now_local(tz_name).date()


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1
