from __future__ import annotations

import re

from .base import NikFormat, digits


class PrefixConcatFormat(NikFormat):
    """The ``PREFIX + SEQUENCE`` sentinel: prefix immediately followed by the padded sequence."""

    kind = "prefix_concat"

    def render(self, prefix: str, padded_sequence: str) -> str:
        return f"{prefix}{padded_sequence}"

    def regex(self, prefix: str, sequence_length: int) -> str:
        return f"^{re.escape(prefix)}{digits(sequence_length)}$"
