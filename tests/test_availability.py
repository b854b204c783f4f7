"""
Tests for slot generation and date picker metadata.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from app.application.use_cases.availability import (
    day_bounds,
    list_pickable_dates,
    list_slots,
    parse_time_to_minutes,
)
from app.domain.entities.booking_config import (
    DEFAULT_BOOKING_CONFIG,
    CalendarBookingConfig,
    Weekday,
    WorkingHoursDay,
    WorkPeriod,
)
from app.domain.entities.slot import BusyInterval

SAO_PAULO = ZoneInfo("America/Sao_Paulo")
MONDAY = date(2026, 3, 16)
TUESDAY = date(2026, 3, 17)
SATURDAY = date(2026, 3, 21)
NOW = datetime(2026, 3, 16, 11, 0, tzinfo=timezone.utc)  # 08:00 local


def _local(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=SAO_PAULO)


def _with_periods(*periods: tuple[str, str], weekday: Weekday = Weekday.TUE, **overrides) -> CalendarBookingConfig:
    """Default config where one weekday only has the given periods."""
    working_hours = tuple(
        WorkingHoursDay(
            day=entry.day,
            enabled=entry.enabled,
            start=entry.start,
            end=entry.end,
            periods=tuple(WorkPeriod(start=s, end=e) for s, e in periods) if entry.day == weekday else (),
        )
        for entry in DEFAULT_BOOKING_CONFIG.working_hours
    )
    return replace(DEFAULT_BOOKING_CONFIG, working_hours=working_hours, **overrides)


def test_parse_time_to_minutes():
    assert parse_time_to_minutes("09:00") == 540
    assert parse_time_to_minutes("12:01") == 721
    assert parse_time_to_minutes("00:00") == 0


def test_full_day_without_busy_intervals():
    slots = list_slots(TUESDAY, DEFAULT_BOOKING_CONFIG, [], now=NOW)

    assert len(slots) == 18
    assert slots[0].id == "2026-03-17T12:00:00Z"
    assert slots[0].title == "09:00"
    assert slots[-1].title == "17:30"


def test_today_respects_min_advance_hours():
    """now 08:00 + 4h: 12:00 itself is excluded, 12:30 is the first slot."""
    slots = list_slots(MONDAY, DEFAULT_BOOKING_CONFIG, [], now=NOW)

    assert [s.title for s in slots][:2] == ["12:30", "13:00"]
    assert len(slots) == 11


def test_advance_notice_boundary_is_exclusive():
    """With a 4h notice and now at 08:00, 12:00 is excluded and 12:01 is included."""
    excluded = _with_periods(("12:00", "12:30"), weekday=Weekday.MON)
    included = _with_periods(("12:01", "12:31"), weekday=Weekday.MON)

    assert list_slots(MONDAY, excluded, [], now=NOW) == []
    assert [s.title for s in list_slots(MONDAY, included, [], now=NOW)] == ["12:01"]


def test_disabled_weekday_has_no_slots():
    assert list_slots(SATURDAY, DEFAULT_BOOKING_CONFIG, [], now=NOW) == []


def test_buffered_busy_interval_overlap():
    """Busy [10:00, 10:30) with a 10 minute buffer blocks [09:50, 10:40)."""
    busy = [BusyInterval(start=_local(TUESDAY, 10), end=_local(TUESDAY, 10, 30))]

    assert list_slots(TUESDAY, _with_periods(("09:49", "10:19")), busy, now=NOW) == []
    assert list_slots(TUESDAY, _with_periods(("09:40", "10:10")), busy, now=NOW) == []
    assert [s.title for s in list_slots(TUESDAY, _with_periods(("10:40", "11:10")), busy, now=NOW)] == ["10:40"]


def test_busy_interval_removes_only_overlapping_slots():
    busy = [BusyInterval(start=_local(TUESDAY, 10), end=_local(TUESDAY, 10, 30))]
    titles = [s.title for s in list_slots(TUESDAY, DEFAULT_BOOKING_CONFIG, busy, now=NOW)]

    assert "09:00" in titles
    assert "09:30" not in titles
    assert "10:00" not in titles
    assert "10:30" not in titles
    assert "11:00" in titles


def test_multiple_periods_are_returned_in_order():
    config = _with_periods(("14:00", "15:00"), ("09:00", "10:00"))
    titles = [s.title for s in list_slots(TUESDAY, config, [], now=NOW)]

    assert titles == ["09:00", "09:30", "14:00", "14:30"]


def test_period_shorter_than_duration_yields_nothing():
    config = _with_periods(("09:00", "09:20"))
    assert list_slots(TUESDAY, config, [], now=NOW) == []


def test_slots_use_configured_timezone():
    config = replace(DEFAULT_BOOKING_CONFIG, timezone="Asia/Tokyo", min_advance_hours=0)
    slots = list_slots(TUESDAY, config, [], now=NOW)

    assert slots[0].title == "09:00"
    assert slots[0].id == "2026-03-17T00:00:00Z"


def test_day_bounds_are_local_midnights():
    start, end = day_bounds(TUESDAY, DEFAULT_BOOKING_CONFIG)

    assert start.astimezone(timezone.utc) == datetime(2026, 3, 17, 3, 0, tzinfo=timezone.utc)
    assert end.astimezone(timezone.utc) == datetime(2026, 3, 18, 3, 0, tzinfo=timezone.utc)


def test_pickable_dates_with_default_config():
    picker = list_pickable_dates(DEFAULT_BOOKING_CONFIG, now=NOW)

    assert picker.min_date == MONDAY
    assert picker.max_date == date(2026, 3, 30)
    assert picker.include_days == ["Mon", "Tue", "Wed", "Thu", "Fri"]
    assert picker.unavailable_dates == [
        date(2026, 3, 21),
        date(2026, 3, 22),
        date(2026, 3, 28),
        date(2026, 3, 29),
    ]
    assert picker.to_screen_data()["unavailable_dates"][0] == "2026-03-21"


def test_pickable_dates_today_is_local_date():
    """23:30 UTC on Monday is already Tuesday in Tokyo."""
    config = replace(DEFAULT_BOOKING_CONFIG, timezone="Asia/Tokyo", max_advance_days=0)
    picker = list_pickable_dates(config, now=datetime(2026, 3, 16, 23, 30, tzinfo=timezone.utc))

    assert picker.min_date == TUESDAY
    assert picker.max_date == TUESDAY
    assert picker.unavailable_dates == []


DST_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _dst_sunday_config(*periods: tuple[str, str]) -> CalendarBookingConfig:
    """New York, Sunday enabled with the given periods and no notice or buffer."""
    config = _with_periods(
        *periods,
        weekday=Weekday.SUN,
        timezone="America/New_York",
        min_advance_hours=0,
        slot_buffer_minutes=0,
    )
    working_hours = tuple(
        replace(entry, enabled=True) if entry.day == Weekday.SUN else entry for entry in config.working_hours
    )
    return replace(config, working_hours=working_hours)


def test_spring_forward_skips_nonexistent_local_times():
    """On 2026-03-08 New York clocks jump from 02:00 to 03:00."""
    config = _dst_sunday_config(("01:00", "04:00"))
    slots = list_slots(date(2026, 3, 8), config, [], now=DST_NOW)

    assert [s.id for s in slots] == [
        "2026-03-08T06:00:00Z",
        "2026-03-08T06:30:00Z",
        "2026-03-08T07:00:00Z",
        "2026-03-08T07:30:00Z",
    ]
    assert [s.title for s in slots] == ["01:00", "01:30", "03:00", "03:30"]


def test_spring_forward_overlap_uses_elapsed_time():
    """01:30 EST ends at 07:00Z, so a meeting starting at 03:00 EDT does not block it."""
    config = _dst_sunday_config(("01:00", "04:00"))
    busy = [
        BusyInterval(
            start=datetime(2026, 3, 8, 7, 0, tzinfo=timezone.utc),
            end=datetime(2026, 3, 8, 7, 30, tzinfo=timezone.utc),
        )
    ]

    titles = [s.title for s in list_slots(date(2026, 3, 8), config, busy, now=DST_NOW)]

    assert titles == ["01:00", "01:30", "03:30"]
