from __future__ import annotations

import re
from abc import ABC, abstractmethod

SAMPLE_SEQUENCE = 1


class NikFormat(ABC):
    """Strategy Pattern: how a department's NIK is rendered and recognised."""

    kind: str = ""

    @abstractmethod
    def render(self, prefix: str, padded_sequence: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def regex(self, prefix: str, sequence_length: int) -> str:
        """Anchored regex accepting every NIK this format can produce."""
        raise NotImplementedError

    def matches(self, value: str, prefix: str, sequence_length: int) -> bool:
        return re.fullmatch(self.regex(prefix, sequence_length), value) is not None

    def example(self, prefix: str, sequence_length: int) -> str:
        return self.render(prefix, str(SAMPLE_SEQUENCE).zfill(sequence_length))


def digits(sequence_length: int) -> str:
    return f"[0-9]{{{int(sequence_length)}}}"
