from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_FORMAT_PATTERN
from .formats.base import NikFormat
from .formats.custom_literal import CustomLiteralFormat
from .formats.placeholder_template import PlaceholderTemplateFormat
from .formats.prefix_concat import PrefixConcatFormat


@dataclass
class NikFormatFactory:
    """Factory Pattern: parse a stored ``format_pattern`` once into a NikFormat."""

    sentinel: str = DEFAULT_FORMAT_PATTERN

    def for_pattern(self, pattern: Optional[str]) -> NikFormat:
        text = (pattern or "").strip()
        if text and PlaceholderTemplateFormat.accepts(text):
            return PlaceholderTemplateFormat(text)
        if text == self.sentinel:
            return PrefixConcatFormat()
        return CustomLiteralFormat(text or None)


default_format_factory = NikFormatFactory()
