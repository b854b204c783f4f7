from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.domain.entities.booking_config import Weekday

WEEKDAY_FULL_LABELS: dict[str, dict[Weekday, str]] = {
    "pt": {
        Weekday.MON: "Segunda",
        Weekday.TUE: "Terca",
        Weekday.WED: "Quarta",
        Weekday.THU: "Quinta",
        Weekday.FRI: "Sexta",
        Weekday.SAT: "Sabado",
        Weekday.SUN: "Domingo",
    },
    "en": {
        Weekday.MON: "Monday",
        Weekday.TUE: "Tuesday",
        Weekday.WED: "Wednesday",
        Weekday.THU: "Thursday",
        Weekday.FRI: "Friday",
        Weekday.SAT: "Saturday",
        Weekday.SUN: "Sunday",
    },
}

DATE_FORMATS = {
    "pt": ("%d/%m/%Y", "%d/%m"),
    "en": ("%m/%d/%Y", "%m/%d"),
}


def _language(language: str) -> str:
    return language if language in WEEKDAY_FULL_LABELS else "pt"


def weekday_label(day: date, language: str = "pt") -> str:
    return WEEKDAY_FULL_LABELS[_language(language)][Weekday.from_index(day.weekday())]


def format_date_label(day: date, language: str = "pt") -> str:
    """Long form for screen subtitles, e.g. "16/03/2026 (Segunda)"."""
    long_format, _ = DATE_FORMATS[_language(language)]
    return f"{day.strftime(long_format)} ({weekday_label(day, language)})"


def format_date_chip(day: date, language: str = "pt") -> str:
    _, short_format = DATE_FORMATS[_language(language)]
    return f"{weekday_label(day, language)} - {day.strftime(short_format)}"


def format_local_time(instant: datetime, timezone: str) -> str:
    return instant.astimezone(ZoneInfo(timezone)).strftime("%H:%M")


def parse_iso_instant(value: str) -> datetime | None:
    """Parse a UTC ISO instant as produced for slot ids. Returns None if invalid."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def parse_flow_date(value: str) -> date | None:
    """Parse the zone-less "YYYY-MM-DD" string sent by the date picker."""
    try:
        return date.fromisoformat(value.strip()[:10])
    except (ValueError, AttributeError):
        return None
