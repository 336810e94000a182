from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def round_currency(value: Decimal) -> Decimal:
    """Round half-up to 2 decimal places."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(base: Decimal, percentage: Decimal) -> Decimal:
    return round_currency(base * percentage / HUNDRED)


def total(values: Iterable[Optional[Decimal]]) -> Decimal:
    """Sum, treating None as zero. Inputs are expected to be rounded already."""
    out = ZERO
    for v in values:
        if v is not None:
            out += v
    return round_currency(out)
