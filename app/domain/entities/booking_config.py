from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Weekday(str, Enum):
    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        """Map ``date.weekday()`` (Monday == 0) to a Weekday."""
        return WEEKDAYS[index]

    @property
    def label(self) -> str:
        return self.value.capitalize()


WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)


@dataclass(frozen=True)
class WorkPeriod:
    start: str  # "HH:MM"
    end: str


@dataclass(frozen=True)
class WorkingHoursDay:
    day: Weekday
    enabled: bool
    start: str
    end: str
    periods: tuple[WorkPeriod, ...] = ()

    def work_periods(self) -> tuple[WorkPeriod, ...]:
        if self.periods:
            return self.periods
        return (WorkPeriod(start=self.start, end=self.end),)


@dataclass(frozen=True)
class CalendarBookingConfig:
    timezone: str = "America/Sao_Paulo"
    slot_duration_minutes: int = 30
    slot_buffer_minutes: int = 10
    working_hours: tuple[WorkingHoursDay, ...] = field(default_factory=lambda: DEFAULT_WORKING_HOURS)
    min_advance_hours: float = 4
    max_advance_days: int = 14
    allow_simultaneous: bool = False

    def day_config(self, day: Weekday) -> WorkingHoursDay | None:
        for entry in self.working_hours:
            if entry.day == day:
                return entry
        return None

    def is_enabled(self, day: Weekday) -> bool:
        entry = self.day_config(day)
        return bool(entry and entry.enabled)


DEFAULT_WORKING_HOURS: tuple[WorkingHoursDay, ...] = (
    WorkingHoursDay(day=Weekday.MON, enabled=True, start="09:00", end="18:00"),
    WorkingHoursDay(day=Weekday.TUE, enabled=True, start="09:00", end="18:00"),
    WorkingHoursDay(day=Weekday.WED, enabled=True, start="09:00", end="18:00"),
    WorkingHoursDay(day=Weekday.THU, enabled=True, start="09:00", end="18:00"),
    WorkingHoursDay(day=Weekday.FRI, enabled=True, start="09:00", end="18:00"),
    WorkingHoursDay(day=Weekday.SAT, enabled=False, start="09:00", end="13:00"),
    WorkingHoursDay(day=Weekday.SUN, enabled=False, start="09:00", end="13:00"),
)

DEFAULT_BOOKING_CONFIG = CalendarBookingConfig()
