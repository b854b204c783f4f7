from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from app.domain.entities.slot import BusyInterval


class CalendarPort(ABC):
    @abstractmethod
    def list_busy_intervals(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        time_zone: str,
    ) -> list[BusyInterval]:
        """List occupied intervals overlapping [time_min, time_max)."""
        raise NotImplementedError

    @abstractmethod
    def create_event(self, calendar_id: str, event: dict[str, Any]) -> dict[str, Any]:
        """Create calendar event. Returns {"id": ..., "link": ...}."""
        raise NotImplementedError
