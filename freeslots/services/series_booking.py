"""
Write path for recurring bookings.

Occurrences are planned with the same stepping rules as the recurrence
counter and checked against one snapshot of occupied intervals before
anything is written.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Tuple, Union

from pendulum import DateTime

from ..domain.cadence import iter_occurrences
from ..domain.conflicts import has_conflict
from ..domain.exceptions import ConfigurationError, SeriesConflictError
from ..domain.models import Cadence, CreatedInterval, SeriesRecord, SeriesResult, SlotPolicy
from .free_slots import IntervalReaderProtocol, IntervalWriterProtocol

logger = logging.getLogger(__name__)


class IntervalStoreProtocol(IntervalReaderProtocol, IntervalWriterProtocol, Protocol):
    """Store offering both the read and the write side."""


class SeriesMaterializer:
    """
    Creates the occupied intervals of a recurring booking.

    The series stops at the first occupied occurrence: later occurrences are
    never skipped to. A series cut short this way is a successful result;
    only a conflict on the very first occurrence is an error.
    """

    def __init__(self, store: IntervalStoreProtocol) -> None:
        self._store = store

    def materialize_series(
        self,
        *,
        resource_id: int,
        tenant_id: int,
        start: DateTime,
        end: DateTime,
        cadence: Union[Cadence, str],
        requested_count: int,
        policy: SlotPolicy,
        title: str = "",
        description: str = "",
        location: str = "",
    ) -> SeriesResult:
        """
        Plan, check and persist a series.

        Args:
            resource_id: Resource the series is booked on
            tenant_id: Owning tenant
            start: Start of the first occurrence
            end: End of the first occurrence
            cadence: Cadence or cadence name; must be allowed by the policy
            requested_count: Occurrences wanted, capped at the policy maximum
            policy: Policy providing the allowed cadences, cap and buffer

        Returns:
            SeriesResult with one CreatedInterval per persisted occurrence

        Raises:
            ConfigurationError: If the request does not fit the policy
            SeriesConflictError: If the first occurrence is already occupied
            StoreError: If the store cannot be read or written
        """
        cadence = Cadence.parse(cadence)
        self._validate(start, end, cadence, requested_count, policy)

        planned_count = min(requested_count, policy.recurrence.max_series_bookings)
        occurrences = list(iter_occurrences(start, end, cadence, planned_count))
        accepted = self._accept_until_conflict(resource_id, tenant_id, occurrences, policy.buffer_time)

        if not accepted:
            raise SeriesConflictError(f"Conflict detected at first occurrence ({start.to_iso8601_string()})")

        series_id = self._store.create_series(
            SeriesRecord(
                resource_id=resource_id,
                tenant_id=tenant_id,
                cadence=cadence,
                start=start,
                end=end,
                last_date=accepted[-1][1],
                title=title,
                description=description,
                location=location,
            )
        )

        intervals: List[CreatedInterval] = []
        for position, (occurrence_start, occurrence_end) in enumerate(accepted, start=1):
            interval_id = self._store.create_occupied_interval(
                resource_id,
                tenant_id,
                occurrence_start,
                occurrence_end,
                series_id,
                position,
            )
            intervals.append(
                CreatedInterval(
                    id=interval_id,
                    start=occurrence_start,
                    end=occurrence_end,
                    series_id=series_id,
                    position_in_series=position,
                )
            )

        logger.debug(
            "Series %s (%s) created with %d occurrence(s) for resource %s",
            series_id,
            cadence.value,
            len(intervals),
            resource_id,
        )

        if len(intervals) < planned_count:
            logger.info(
                "Series %s truncated at occurrence %d of %d by an existing booking",
                series_id,
                len(intervals) + 1,
                planned_count,
            )

        return SeriesResult(
            series_id=series_id,
            cadence=cadence,
            planned_count=planned_count,
            intervals=intervals,
        )

    def _accept_until_conflict(
        self,
        resource_id: int,
        tenant_id: int,
        occurrences: List[Tuple[DateTime, DateTime]],
        buffer_minutes: int,
    ) -> List[Tuple[DateTime, DateTime]]:
        """Return the leading occurrences that overlap no occupied interval."""
        occupied = self._store.fetch_occupied_intervals(
            resource_id,
            tenant_id,
            occurrences[0][0].subtract(minutes=buffer_minutes),
            occurrences[-1][1].add(minutes=buffer_minutes),
        )

        accepted: List[Tuple[DateTime, DateTime]] = []
        for occurrence_start, occurrence_end in occurrences:
            if has_conflict(occurrence_start, occurrence_end, occupied, buffer_minutes):
                break
            accepted.append((occurrence_start, occurrence_end))

        return accepted

    @staticmethod
    def _validate(
        start: DateTime,
        end: DateTime,
        cadence: Cadence,
        requested_count: int,
        policy: SlotPolicy,
    ) -> None:
        if not policy.recurrence.enabled:
            raise ConfigurationError("Policy does not allow recurring bookings")

        if not policy.recurrence.allows(cadence):
            raise ConfigurationError(f"Cadence '{cadence.value}' is not allowed by the policy")

        if requested_count < 1:
            raise ConfigurationError(f"requested_count must be at least 1, got {requested_count}")

        if start >= end:
            raise ConfigurationError(f"Start time {start} must be before end time {end}")
