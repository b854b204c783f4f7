from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from app.application.exceptions import CalendarUnavailableError
from app.application.ports.calendar import CalendarPort
from app.core.config import settings
from app.domain.entities.slot import BusyInterval


class GoogleCalendar(CalendarPort):
    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._access_token = access_token or settings.GOOGLE_CALENDAR_ACCESS_TOKEN
        self._base_url = (base_url or settings.GOOGLE_CALENDAR_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def _headers(self) -> dict[str, str]:
        if not self._access_token:
            raise CalendarUnavailableError("Google Calendar not connected")
        return {"Authorization": f"Bearer {self._access_token}"}

    def list_busy_intervals(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        time_zone: str,
    ) -> list[BusyInterval]:
        payload = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "timeZone": time_zone,
            "items": [{"id": calendar_id}],
        }
        try:
            response = self._client.post(f"{self._base_url}/freeBusy", json=payload, headers=self._headers())
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error listing busy intervals", extra={"reason": type(e).__name__})
            raise CalendarUnavailableError("Calendar availability lookup failed") from e

        calendar = (data.get("calendars") or {}).get(calendar_id) or {}
        if calendar.get("errors"):
            self._logger.error("Calendar freeBusy returned errors", extra={"reason": calendar["errors"]})
            raise CalendarUnavailableError("Calendar availability lookup failed")

        intervals: list[BusyInterval] = []
        for item in calendar.get("busy", []):
            try:
                start = datetime.fromisoformat(item["start"].replace("Z", "+00:00"))
                end = datetime.fromisoformat(item["end"].replace("Z", "+00:00"))
            except (KeyError, ValueError, AttributeError):
                continue
            intervals.append(BusyInterval(start=start, end=end))
        return intervals

    def create_event(self, calendar_id: str, event: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}/calendars/{quote(calendar_id, safe='')}/events"
        try:
            response = self._client.post(url, json=event, headers=self._headers())
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error creating calendar event", extra={"reason": type(e).__name__})
            raise CalendarUnavailableError("Calendar event could not be created") from e

        event_id = data.get("id")
        if not event_id:
            raise CalendarUnavailableError("No event ID returned from Google Calendar")

        self._logger.info("Calendar event created", extra={"event_id": event_id})
        return {"id": str(event_id), "link": data.get("htmlLink")}
