"""
Counting how many recurring occurrences of a slot can still be booked.
"""

from datetime import date
from typing import List, Sequence

import pendulum
from pendulum import DateTime

from .cadence import iter_occurrences, next_occurrence
from .conflicts import has_conflict
from .models import Cadence, CandidateSlot, OccupiedInterval, RecurrencePolicy

# A weekday-occurrence step may land up to a week later than a same-date step.
HORIZON_SLACK_DAYS = 7


class RecurrenceCounter:
    """
    Computes the available-recurrence count for each slot.

    For every allowed cadence, occurrences are tested in order starting with
    the slot itself. Counting stops at the first occupied occurrence, at the
    series cap, or once an occurrence starts after the horizon. The slot keeps
    the best count over all allowed cadences.
    """

    def __init__(self, recurrence: RecurrencePolicy, buffer_minutes: int = 0):
        self.recurrence = recurrence
        self.buffer_minutes = buffer_minutes

    def apply(
        self,
        slots: Sequence[CandidateSlot],
        occupied: Sequence[OccupiedInterval],
        horizon: date,
    ) -> List[CandidateSlot]:
        """Set ``available_recurrences`` on every slot and return them."""
        for slot in slots:
            slot.available_recurrences = max(
                (
                    self.count(slot.start, slot.end, cadence, occupied, horizon)
                    for cadence in self.recurrence.allowed_cadences
                ),
                default=0,
            )
        return list(slots)

    def count(
        self,
        start: DateTime,
        end: DateTime,
        cadence: Cadence,
        occupied: Sequence[OccupiedInterval],
        horizon: date,
    ) -> int:
        """Count consecutive conflict-free occurrences for one cadence."""
        if cadence is Cadence.NONE:
            return 1

        count = 0
        for occurrence_start, occurrence_end in iter_occurrences(
            start, end, cadence, self.recurrence.max_series_bookings
        ):
            if occurrence_start.date() > horizon:
                break
            if has_conflict(occurrence_start, occurrence_end, occupied, self.buffer_minutes):
                break
            count += 1

        return count


def recurrence_horizon(date_to: date, recurrence: RecurrencePolicy) -> date:
    """
    Latest date a series starting on ``date_to`` can reach under the policy.

    Conflicts must be visible up to this date even though only
    ``[date_from, date_to]`` is displayed.
    """
    if not recurrence.enabled:
        return date_to

    anchor = pendulum.datetime(date_to.year, date_to.month, date_to.day)
    horizon: DateTime = anchor

    for cadence in recurrence.allowed_cadences:
        current = anchor
        for _ in range(recurrence.max_series_bookings - 1):
            stepped = next_occurrence(cadence, current)
            if stepped is None:
                break
            current = stepped
        horizon = max(horizon, current)

    if horizon == anchor:
        return date_to
    return horizon.add(days=HORIZON_SLACK_DAYS).date()
