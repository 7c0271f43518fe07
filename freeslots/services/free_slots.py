"""
Application service for computing free slots of a bookable resource.

The service fetches one consistent snapshot of occupied intervals through a
store protocol and delegates every calculation to the domain layer. Storage
is injected, so the in-memory store, the JSON store or a real database
adapter can be plugged in without touching the pipeline.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Optional, Protocol

import pendulum
from pendulum import DateTime, Timezone

from ..domain.availability import resolve_weekly_availability
from ..domain.conflicts import filter_conflicting_slots
from ..domain.models import (
    FreeSlotsQuery,
    FreeSlotsResult,
    OccupiedInterval,
    SeriesRecord,
    SlotConfiguration,
    SlotPolicy,
    WeeklyAvailability,
)
from ..domain.month_summary import build_month_summary
from ..domain.recurrence import RecurrenceCounter, recurrence_horizon
from ..domain.slot_generator import SlotGenerator
from ..domain.timezones import resolve_timezone

logger = logging.getLogger(__name__)


class IntervalReaderProtocol(Protocol):
    """Read side of the booking store."""

    def fetch_occupied_intervals(
        self,
        resource_id: int,
        tenant_id: int,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[OccupiedInterval]:
        """Return intervals of the resource overlapping the window."""

    def fetch_default_availability(
        self,
        resource_id: int,
        tenant_id: int,
    ) -> Optional[WeeklyAvailability]:
        """Return the resource's own weekly schedule, if it has one."""


class IntervalWriterProtocol(Protocol):
    """Write side of the booking store, used by the series materializer."""

    def create_series(self, record: SeriesRecord) -> int:
        """Persist a series header and return its id."""

    def create_occupied_interval(
        self,
        resource_id: int,
        tenant_id: int,
        start: DateTime,
        end: DateTime,
        series_id: int,
        position_in_series: int,
    ) -> int:
        """Persist one occurrence and return its id."""


class FreeSlotsService:
    """
    Orchestrates availability resolution, slot generation, conflict
    filtering, recurrence counting and the month overview.

    The clock is read once per request; every notice and advance-window
    check of that request uses the same value.
    """

    def __init__(
        self,
        store: IntervalReaderProtocol,
        clock: Callable[[], DateTime] = pendulum.now,
    ) -> None:
        self._store = store
        self._clock = clock

    def compute_free_slots(
        self,
        query: FreeSlotsQuery,
        policy: SlotPolicy,
        *,
        now: Optional[DateTime] = None,
    ) -> FreeSlotsResult:
        """
        Compute bookable slots for the query's date range.

        Raises:
            StoreError: If the occupied-interval snapshot cannot be fetched
        """
        tz = resolve_timezone(query.timezone or policy.timezone)
        current_time = now if now is not None else self._clock()

        availability = resolve_weekly_availability(
            policy.weekly_availability,
            lambda: self._store.fetch_default_availability(query.resource_id, query.tenant_id),
        )

        horizon = query.horizon or recurrence_horizon(query.date_to, policy.recurrence)
        occupied = self.fetch_occupied(query, tz, horizon, policy.buffer_time)

        generator = SlotGenerator(policy=policy, tz=tz)
        generated = generator.generate(query.date_from, query.date_to, availability, current_time)
        available = filter_conflicting_slots(generated, occupied, policy.buffer_time)

        if policy.recurrence.enabled:
            counter = RecurrenceCounter(policy.recurrence, buffer_minutes=policy.buffer_time)
            available = counter.apply(available, occupied, horizon)

        logger.debug(
            "Resource %s: %d slots generated, %d available, %d occupied intervals up to %s",
            query.resource_id,
            len(generated),
            len(available),
            len(occupied),
            horizon,
        )

        config = SlotConfiguration(
            duration=policy.slot_duration,
            interval=policy.recurrence.label,
            number_max=policy.recurrence.max_series_bookings,
            buffer_time=policy.buffer_time,
            weekly_availability=availability,
        )

        return FreeSlotsResult(
            slots=available,
            month=build_month_summary(generated, available, query.date_from),
            config=config,
            timezone=tz.name,
        )

    def fetch_occupied(
        self,
        query: FreeSlotsQuery,
        tz: Timezone,
        horizon: date,
        buffer_minutes: int = 0,
    ) -> List[OccupiedInterval]:
        """
        Fetch the snapshot covering the visible range and the recurrence horizon.

        The window is widened by the buffer so that bookings just outside it
        still push back slots at its edges.
        """
        window_start = pendulum.datetime(
            query.date_from.year, query.date_from.month, query.date_from.day, tz=tz
        ).subtract(minutes=buffer_minutes)
        window_end = (
            pendulum.datetime(horizon.year, horizon.month, horizon.day, tz=tz)
            .end_of("day")
            .add(minutes=buffer_minutes)
        )

        return self._store.fetch_occupied_intervals(
            query.resource_id,
            query.tenant_id,
            window_start,
            window_end,
        )
