"""
Domain layer - Pure business logic without store access or I/O.
"""

from .availability import resolve_weekly_availability
from .cadence import add_month_same_weekday, iter_occurrences, next_occurrence
from .conflicts import filter_conflicting_slots, has_conflict, overlaps_interval
from .exceptions import ConfigurationError, FreeSlotsError, SeriesConflictError, StoreError
from .models import (
    Cadence,
    CandidateSlot,
    DateRange,
    FreeSlotsQuery,
    FreeSlotsResult,
    OccupiedInterval,
    RecurrencePolicy,
    SeriesResult,
    SlotPolicy,
    TimeRange,
    WeeklyAvailability,
)
from .month_summary import build_month_summary
from .recurrence import RecurrenceCounter, recurrence_horizon
from .slot_generator import SlotGenerator
from .timezones import resolve_timezone

__all__ = [
    "Cadence",
    "CandidateSlot",
    "ConfigurationError",
    "DateRange",
    "FreeSlotsError",
    "FreeSlotsQuery",
    "FreeSlotsResult",
    "OccupiedInterval",
    "RecurrenceCounter",
    "RecurrencePolicy",
    "SeriesConflictError",
    "SeriesResult",
    "SlotGenerator",
    "SlotPolicy",
    "StoreError",
    "TimeRange",
    "WeeklyAvailability",
    "add_month_same_weekday",
    "build_month_summary",
    "filter_conflicting_slots",
    "has_conflict",
    "iter_occurrences",
    "next_occurrence",
    "overlaps_interval",
    "recurrence_horizon",
    "resolve_timezone",
    "resolve_weekly_availability",
]
