"""Historical NIK formats still accepted by validation.

Keyed by department name. Each entry lists extra (prefix, sequence_length)
pairs that validate in addition to the department's configured format.
Nothing here is used for generation.
"""

from __future__ import annotations

from typing import Sequence

LEGACY_ACCEPTED_FORMATS: dict[str, tuple[tuple[str, int], ...]] = {
    "operational": (("OPS", 3), ("OPS19", 3)),
}


def legacy_formats_for(department_name: str) -> Sequence[tuple[str, int]]:
    return LEGACY_ACCEPTED_FORMATS.get((department_name or "").strip().lower(), ())
