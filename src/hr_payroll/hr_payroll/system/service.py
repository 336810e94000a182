from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

import mysql.connector

from .model import SystemSetting
from .repository import SystemRepository

logger = logging.getLogger(__name__)


class SystemService:
    def __init__(self, system: SystemRepository, *, environment: str, now: Optional[Callable[[], datetime]] = None):
        self._system = system
        self._environment = environment
        self._now = now or datetime.now

    def health(self) -> dict:
        return {"status": "ok", "timestamp": self._now(), "environment": self._environment}

    def database_health(self) -> tuple[dict, bool]:
        """Returns ``(payload, healthy)``; an unreachable database is reported, not raised."""
        try:
            self._system.ping()
            counts = self._system.table_counts()
        except mysql.connector.Error as e:
            logger.error("Database health check failed: %s", e)
            return (
                {"status": "error", "database": "disconnected", "error": str(e), "timestamp": self._now()},
                False,
            )
        return {"status": "ok", "database": "connected", "counts": counts, "timestamp": self._now()}, True

    def list_settings(self) -> Sequence[SystemSetting]:
        return self._system.list_settings()
