from __future__ import annotations

from typing import Dict, Protocol, Sequence

from .model import SystemSetting


class SystemRepository(Protocol):
    def ping(self) -> None:
        """Raise the driver error when the database is unreachable."""
        raise NotImplementedError

    def table_counts(self) -> Dict[str, int]:
        raise NotImplementedError

    def list_settings(self) -> Sequence[SystemSetting]:
        raise NotImplementedError
