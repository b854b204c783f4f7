from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain.entities.booking_config import (
    DEFAULT_WORKING_HOURS,
    WEEKDAYS,
    CalendarBookingConfig,
    Weekday,
    WorkingHoursDay,
    WorkPeriod,
)

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class WorkPeriodDTO(BaseModel):
    start: str = Field(pattern=_TIME_PATTERN)
    end: str = Field(pattern=_TIME_PATTERN)

    @model_validator(mode="after")
    def start_before_end(self) -> "WorkPeriodDTO":
        if self.start >= self.end:
            raise ValueError(f"period start {self.start} must precede end {self.end}")
        return self


class WorkingHoursDayDTO(BaseModel):
    day: Weekday
    enabled: bool = False
    start: str = Field(default="09:00", pattern=_TIME_PATTERN)
    end: str = Field(default="18:00", pattern=_TIME_PATTERN)
    slots: list[WorkPeriodDTO] = Field(default_factory=list)

    @model_validator(mode="after")
    def start_before_end(self) -> "WorkingHoursDayDTO":
        if not self.slots and self.start >= self.end:
            raise ValueError(f"{self.day.value}: start {self.start} must precede end {self.end}")
        return self

    def to_entity(self) -> WorkingHoursDay:
        periods = tuple(WorkPeriod(start=p.start, end=p.end) for p in self.slots)
        return WorkingHoursDay(
            day=self.day,
            enabled=self.enabled,
            start=self.start,
            end=self.end,
            periods=periods,
        )


class BookingConfigDTO(BaseModel):
    """Stored booking configuration, camelCase keys as saved by the settings page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    timezone: str = "America/Sao_Paulo"
    slot_duration_minutes: int = Field(default=30, gt=0, alias="slotDurationMinutes")
    slot_buffer_minutes: int = Field(default=10, ge=0, alias="slotBufferMinutes")
    working_hours: list[WorkingHoursDayDTO] = Field(default_factory=list, alias="workingHours")
    min_advance_hours: float = Field(default=4, ge=0, alias="minAdvanceHours")
    max_advance_days: int = Field(default=14, ge=0, alias="maxAdvanceDays")
    allow_simultaneous: bool = Field(default=False, alias="allowSimultaneous")

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {value!r}") from e
        return value

    def to_entity(self) -> CalendarBookingConfig:
        # one entry per weekday; stored entries win, missing days keep defaults
        by_day = {entry.day: entry for entry in DEFAULT_WORKING_HOURS}
        for entry in self.working_hours:
            by_day[entry.day] = entry.to_entity()
        return CalendarBookingConfig(
            timezone=self.timezone,
            slot_duration_minutes=self.slot_duration_minutes,
            slot_buffer_minutes=self.slot_buffer_minutes,
            working_hours=tuple(by_day[day] for day in WEEKDAYS),
            min_advance_hours=self.min_advance_hours,
            max_advance_days=self.max_advance_days,
            allow_simultaneous=self.allow_simultaneous,
        )
