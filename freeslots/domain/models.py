"""
Domain models for availability, slot and recurrence calculations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pendulum import DateTime

from .exceptions import ConfigurationError

WEEKDAYS: Tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def parse_clock(value: str) -> time:
    """Parse a 24h "HH:MM" wall-clock string."""
    parts = str(value).strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid wall-clock time '{value}', expected HH:MM")

    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid wall-clock time '{value}', expected HH:MM")

    return time(hour=hour, minute=minute)


def classify_time_of_day(hour: int) -> str:
    """Classify a start hour into morning, afternoon or evening."""
    if hour < 12:
        return "morning"
    if hour < 18:
        return "afternoon"
    return "evening"


@dataclass(frozen=True)
class TimeRange:
    """
    A wall-clock window within a single day, e.g. 09:00 - 17:00.

    Invariant: start must be before end (ranges never wrap midnight).
    """
    start: str
    end: str

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    @property
    def start_time(self) -> time:
        return parse_clock(self.start)

    @property
    def end_time(self) -> time:
        return parse_clock(self.end)

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start, "end": self.end}

    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


def _to_time_ranges(ranges: Iterable[Any]) -> Tuple[TimeRange, ...]:
    converted: List[TimeRange] = []
    for item in ranges or ():
        if isinstance(item, TimeRange):
            converted.append(item)
        else:
            converted.append(TimeRange(start=item["start"], end=item["end"]))
    return tuple(converted)


@dataclass(frozen=True)
class WeeklyAvailability:
    """
    Availability windows per weekday.

    A schedule with no ranges on any day means "no explicit schedule".
    """
    monday: Tuple[TimeRange, ...] = ()
    tuesday: Tuple[TimeRange, ...] = ()
    wednesday: Tuple[TimeRange, ...] = ()
    thursday: Tuple[TimeRange, ...] = ()
    friday: Tuple[TimeRange, ...] = ()
    saturday: Tuple[TimeRange, ...] = ()
    sunday: Tuple[TimeRange, ...] = ()

    def for_weekday(self, weekday: int) -> Tuple[TimeRange, ...]:
        """Return the windows for a weekday index (0=Monday, 6=Sunday)."""
        return getattr(self, WEEKDAYS[weekday])

    def has_availability(self) -> bool:
        """Check whether any weekday has at least one window."""
        return any(self.for_weekday(index) for index in range(len(WEEKDAYS)))

    @classmethod
    def all_day(cls) -> "WeeklyAvailability":
        """Every weekday open from 00:00 to 23:59."""
        all_day = (TimeRange(start="00:00", end="23:59"),)
        return cls(**{day: all_day for day in WEEKDAYS})

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Iterable[Any]]]) -> "WeeklyAvailability":
        """
        Build a schedule from a mapping of weekday name to ranges.

        Ranges may be TimeRange instances or mappings with start/end keys.
        """
        if not data:
            return cls()

        unknown = [key for key in data if key.lower() not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s) in availability: {', '.join(sorted(unknown))}")

        return cls(**{key.lower(): _to_time_ranges(value) for key, value in data.items()})

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            day: [window.to_dict() for window in getattr(self, day)]
            for day in WEEKDAYS
            if getattr(self, day)
        }


@dataclass(frozen=True)
class DateRange:
    """An inclusive range of calendar dates, used for blocked periods."""
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Blocked range start {self.start} is after its end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class OccupiedInterval:
    """
    An already committed booking.

    Only start and end take part in overlap tests; the remaining fields
    are carried for callers that want to trace a conflict back to its source.
    """
    start: DateTime
    end: DateTime
    id: Optional[int] = None
    series_id: Optional[int] = None
    position_in_series: Optional[int] = None

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")


class Cadence(str, Enum):
    """Recurrence rule for stepping a booking forward in time."""
    NONE = "none"
    WEEKLY = "weekly"
    MONTHLY_DATE = "monthly-date"
    MONTHLY_DAY = "monthly-day"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Any) -> "Cadence":
        """Resolve a cadence name, raising ConfigurationError for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ConfigurationError(f"Unknown cadence: '{value}'") from exc

    @property
    def label(self) -> str:
        """Coarse label used when echoing configuration to clients."""
        if self in (Cadence.MONTHLY_DATE, Cadence.MONTHLY_DAY):
            return "monthly"
        return self.value


@dataclass(frozen=True)
class RecurrencePolicy:
    """Allowed cadences and the cap on series length."""
    allowed_cadences: Tuple[Cadence, ...] = ()
    max_series_bookings: int = 1

    def __post_init__(self):
        if self.max_series_bookings < 0:
            raise ConfigurationError("max_series_bookings must not be negative")
        object.__setattr__(
            self,
            "allowed_cadences",
            tuple(Cadence.parse(cadence) for cadence in self.allowed_cadences),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.allowed_cadences) and self.max_series_bookings > 0

    def allows(self, cadence: Cadence) -> bool:
        return cadence in self.allowed_cadences

    @property
    def label(self) -> str:
        if not self.allowed_cadences:
            return Cadence.NONE.value
        return self.allowed_cadences[0].label


@dataclass(frozen=True)
class SlotPolicy:
    """
    Read-only configuration driving slot generation and recurrence.

    ``weekly_availability`` is the template's own schedule; an empty schedule
    defers to the resource default (see ``resolve_weekly_availability``).
    """
    slot_duration: int
    buffer_time: int = 0
    advance_booking_days: int = 90
    min_notice_hours: int = 24
    allowed_start_minutes: Tuple[int, ...] = ()
    block_dates: Tuple[DateRange, ...] = ()
    timezone: str = "UTC"
    weekly_availability: WeeklyAvailability = field(default_factory=WeeklyAvailability)
    recurrence: RecurrencePolicy = field(default_factory=RecurrencePolicy)

    def __post_init__(self):
        if self.slot_duration <= 0:
            raise ConfigurationError(
                f"slot_duration must be greater than zero, got {self.slot_duration}"
            )
        if self.buffer_time < 0:
            raise ConfigurationError(f"buffer_time must not be negative, got {self.buffer_time}")

        invalid = [minute for minute in self.allowed_start_minutes if not 0 <= minute <= 59]
        if invalid:
            raise ConfigurationError(f"allowed_start_minutes must be between 0 and 59, got {invalid}")

        object.__setattr__(
            self, "allowed_start_minutes", tuple(sorted(set(self.allowed_start_minutes)))
        )
        object.__setattr__(self, "block_dates", tuple(self.block_dates))


@dataclass
class CandidateSlot:
    """
    A bookable slot produced by the slot generator.

    ``start`` and ``end`` are expressed in the resource timezone, so the
    date and time labels below are local.
    """
    start: DateTime
    end: DateTime
    timezone: str
    available_recurrences: int = 0
    available: bool = True

    @property
    def id(self) -> str:
        return f"slot-{self.start.format('YYYY-MM-DD-HH-mm')}"

    @property
    def date(self) -> date:
        return self.start.date()

    @property
    def time(self) -> str:
        return self.start.format("HH:mm")

    @property
    def time_of_day(self) -> str:
        return classify_time_of_day(self.start.hour)

    @property
    def duration(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "start_time": self.start.to_iso8601_string(),
            "end_time": self.end.to_iso8601_string(),
            "date": self.date.isoformat(),
            "time": self.time,
            "duration": self.duration,
            "available": self.available,
            "time_of_day": self.time_of_day,
            "timezone": self.timezone,
            "available_recurrences": self.available_recurrences,
        }

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, YYYY-MM-DD | HH:MM - HH:MM (N min)
        """
        return (
            f"{self.start.format('dddd, YYYY-MM-DD')} | "
            f"{self.time} - {self.end.format('HH:mm')} ({self.duration} min)"
        )


@dataclass(frozen=True)
class FreeSlotsQuery:
    """Request for free slots of one resource over an inclusive date range."""
    resource_id: int
    tenant_id: int
    date_from: date
    date_to: date
    timezone: Optional[str] = None
    horizon: Optional[date] = None

    def __post_init__(self):
        if self.date_from > self.date_to:
            raise ConfigurationError(
                f"date_from {self.date_from} must not be after date_to {self.date_to}"
            )
        if self.horizon is not None and self.horizon < self.date_to:
            raise ConfigurationError(f"horizon {self.horizon} must not be before date_to {self.date_to}")


@dataclass(frozen=True)
class DayData:
    date: date
    available_count: int
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "availableCount": self.available_count,
            "status": self.status,
        }


@dataclass(frozen=True)
class MonthSummary:
    """Per-day availability classification for one calendar month."""
    year: int
    month: int
    days: Tuple[DayData, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "days": [day.to_dict() for day in self.days],
        }


@dataclass(frozen=True)
class SlotConfiguration:
    """Echo of the resolved configuration for client display."""
    duration: int
    interval: str
    number_max: int
    buffer_time: int
    weekly_availability: WeeklyAvailability

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duration": self.duration,
            "interval": self.interval,
            "number_max": self.number_max,
            "buffer_time": self.buffer_time,
            "weekly_availability": self.weekly_availability.to_dict(),
        }


@dataclass
class FreeSlotsResult:
    slots: List[CandidateSlot]
    month: MonthSummary
    config: SlotConfiguration
    timezone: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slots": [slot.to_dict() for slot in self.slots],
            "monthData": self.month.to_dict(),
            "config": self.config.to_dict(),
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class SeriesRecord:
    """Header of a recurring series, written once before its occurrences."""
    resource_id: int
    tenant_id: int
    cadence: Cadence
    start: DateTime
    end: DateTime
    last_date: DateTime
    title: str = ""
    description: str = ""
    location: str = ""


@dataclass(frozen=True)
class CreatedInterval:
    id: int
    start: DateTime
    end: DateTime
    series_id: int
    position_in_series: int


@dataclass
class SeriesResult:
    """
    Outcome of materializing a series.

    A result with fewer intervals than planned is a successful, truncated
    series: an occupied occurrence ended it early.
    """
    series_id: int
    cadence: Cadence
    planned_count: int
    intervals: List[CreatedInterval]

    @property
    def created_count(self) -> int:
        return len(self.intervals)

    @property
    def truncated(self) -> bool:
        return self.created_count < self.planned_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "series_id": self.series_id,
            "cadence": self.cadence.value,
            "planned_count": self.planned_count,
            "created_count": self.created_count,
            "intervals": [
                {
                    "id": interval.id,
                    "start_time": interval.start.to_iso8601_string(),
                    "end_time": interval.end.to_iso8601_string(),
                    "position_in_series": interval.position_in_series,
                }
                for interval in self.intervals
            ],
        }
