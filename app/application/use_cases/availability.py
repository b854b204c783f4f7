from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable
from zoneinfo import ZoneInfo

from app.domain.entities.booking_config import CalendarBookingConfig, Weekday
from app.domain.entities.slot import BusyInterval, PickableDates, Slot


def parse_time_to_minutes(value: str) -> int:
    hours, _, minutes = value.partition(":")
    return int(hours or 0) * 60 + int(minutes or 0)


def to_utc_iso(instant: datetime) -> str:
    return instant.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def local_instant(day: date, minutes: int, tz: ZoneInfo) -> datetime | None:
    """UTC instant for a wall-clock minute-of-day on ``day`` in ``tz``.

    Returns None for wall-clock times skipped by a DST transition.
    """
    naive = datetime.combine(day, time(hour=minutes // 60, minute=minutes % 60))
    instant = naive.replace(tzinfo=tz).astimezone(timezone.utc)
    if instant.astimezone(tz).replace(tzinfo=None) != naive:
        return None
    return instant


def day_bounds(day: date, config: CalendarBookingConfig) -> tuple[datetime, datetime]:
    """Local midnight-to-midnight span of ``day``, used as the busy lookup window."""
    tz = ZoneInfo(config.timezone)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def list_slots(
    day: date,
    config: CalendarBookingConfig,
    busy_intervals: Iterable[BusyInterval],
    now: datetime | None = None,
) -> list[Slot]:
    """Bookable slots for one calendar day.

    Candidates are generated per work period at slot-duration granularity and
    dropped when they start at or before now + min_advance_hours, or when
    [start, start + duration) overlaps a busy interval widened by the buffer
    on both sides.
    """
    tz = ZoneInfo(config.timezone)
    if now is None:
        now = datetime.now(timezone.utc)

    working_day = config.day_config(Weekday.from_index(day.weekday()))
    if not working_day or not working_day.enabled:
        return []

    duration = timedelta(minutes=config.slot_duration_minutes)
    buffer = timedelta(minutes=config.slot_buffer_minutes)
    earliest = now + timedelta(hours=config.min_advance_hours)
    busy = [(b.start - buffer, b.end + buffer) for b in busy_intervals]

    candidates: set[datetime] = set()
    for period in working_day.work_periods():
        current = parse_time_to_minutes(period.start)
        period_end = parse_time_to_minutes(period.end)
        while current + config.slot_duration_minutes <= period_end:
            instant = local_instant(day, current, tz)
            if instant is not None:
                candidates.add(instant)
            current += config.slot_duration_minutes

    slots: list[Slot] = []
    for slot_start in sorted(candidates):
        if slot_start <= earliest:
            continue
        slot_end = slot_start + duration
        if any(slot_start < busy_end and slot_end > busy_start for busy_start, busy_end in busy):
            continue
        slots.append(Slot(id=to_utc_iso(slot_start), title=slot_start.astimezone(tz).strftime("%H:%M")))

    return slots


def list_pickable_dates(config: CalendarBookingConfig, now: datetime | None = None) -> PickableDates:
    """Date picker bounds plus an explicit list of disabled dates within them."""
    tz = ZoneInfo(config.timezone)
    if now is None:
        now = datetime.now(timezone.utc)

    min_date = now.astimezone(tz).date()
    max_date = min_date + timedelta(days=config.max_advance_days)

    include_days = [entry.day.label for entry in config.working_hours if entry.enabled]

    unavailable_dates: list[date] = []
    for offset in range(config.max_advance_days + 1):
        current = min_date + timedelta(days=offset)
        if not config.is_enabled(Weekday.from_index(current.weekday())):
            unavailable_dates.append(current)

    return PickableDates(
        min_date=min_date,
        max_date=max_date,
        include_days=include_days,
        unavailable_dates=unavailable_dates,
    )
