from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.application.ports.calendar import CalendarPort
from app.domain.entities.slot import BusyInterval


class MockCalendar(CalendarPort):
    def __init__(self, busy: list[BusyInterval] | None = None) -> None:
        self._busy: list[BusyInterval] = list(busy or [])
        self._events: dict[str, dict[str, Any]] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def events(self) -> dict[str, dict[str, Any]]:
        return dict(self._events)

    def list_busy_intervals(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        time_zone: str,
    ) -> list[BusyInterval]:
        return [b for b in self._busy if b.start < time_max and b.end > time_min]

    def create_event(self, calendar_id: str, event: dict[str, Any]) -> dict[str, Any]:
        event_id = f"mock_event_{len(self._events) + 1}"
        self._events[event_id] = event
        start = datetime.fromisoformat(event["start"]["dateTime"].replace("Z", "+00:00"))
        end = datetime.fromisoformat(event["end"]["dateTime"].replace("Z", "+00:00"))
        self._busy.append(BusyInterval(start=start, end=end))
        self._logger.info("Mock calendar event created", extra={"event_id": event_id})
        return {"id": event_id, "link": None}
