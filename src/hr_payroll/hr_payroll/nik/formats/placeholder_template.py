from __future__ import annotations

import re

from .base import NikFormat, digits

PREFIX_TOKEN = "{prefix}"
SEQUENCE_TOKEN = "{sequence}"
_TOKEN_RE = re.compile(r"\{prefix\}|\{sequence\}")


class PlaceholderTemplateFormat(NikFormat):
    """Literal template with ``{prefix}`` and ``{sequence}`` placeholders, e.g. ``{prefix}-{sequence}``."""

    kind = "placeholder_template"

    def __init__(self, template: str):
        self.template = template

    def render(self, prefix: str, padded_sequence: str) -> str:
        # Single pass so a prefix that itself contains "{sequence}" is never re-substituted.
        values = {PREFIX_TOKEN: prefix, SEQUENCE_TOKEN: padded_sequence}
        return _TOKEN_RE.sub(lambda m: values[m.group(0)], self.template)

    def regex(self, prefix: str, sequence_length: int) -> str:
        parts: list[str] = []
        pos = 0
        for m in _TOKEN_RE.finditer(self.template):
            parts.append(re.escape(self.template[pos:m.start()]))
            parts.append(re.escape(prefix) if m.group(0) == PREFIX_TOKEN else digits(sequence_length))
            pos = m.end()
        parts.append(re.escape(self.template[pos:]))
        return "^" + "".join(parts) + "$"

    @staticmethod
    def accepts(pattern: str) -> bool:
        return PREFIX_TOKEN in pattern and SEQUENCE_TOKEN in pattern
