from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Slot:
    id: str  # UTC ISO-8601 start instant
    title: str  # local "HH:MM"

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "title": self.title}


@dataclass(frozen=True)
class BusyInterval:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class PickableDates:
    min_date: date
    max_date: date
    include_days: list[str]
    unavailable_dates: list[date]

    def to_screen_data(self) -> dict[str, object]:
        return {
            "min_date": self.min_date.isoformat(),
            "max_date": self.max_date.isoformat(),
            "include_days": list(self.include_days),
            "unavailable_dates": [d.isoformat() for d in self.unavailable_dates],
        }
