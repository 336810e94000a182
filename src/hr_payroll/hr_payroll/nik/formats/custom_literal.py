from __future__ import annotations

from typing import Optional

from .prefix_concat import PrefixConcatFormat


class CustomLiteralFormat(PrefixConcatFormat):
    """Absent or unrecognised pattern text; behaves like prefix concatenation.

    The raw text is kept so it can be echoed back to administrators.
    """

    kind = "custom_literal"

    def __init__(self, raw: Optional[str] = None):
        self.raw = raw
