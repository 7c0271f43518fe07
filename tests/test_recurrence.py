"""
Tests for the recurrence counter and horizon.
"""

import pendulum

from freeslots.domain.models import Cadence, CandidateSlot, OccupiedInterval, RecurrencePolicy
from freeslots.domain.recurrence import RecurrenceCounter, recurrence_horizon

# Wednesday 2026-04-01, 14:00 - 15:00 UTC
START = pendulum.datetime(2026, 4, 1, 14, 0, tz="UTC")
END = START.add(hours=1)
FAR_HORIZON = pendulum.date(2027, 12, 31)


def _busy(year: int, month: int, day: int, hour: int = 14, minutes: int = 60) -> OccupiedInterval:
    start = pendulum.datetime(year, month, day, hour, 0, tz="UTC")
    return OccupiedInterval(start=start, end=start.add(minutes=minutes))


def _counter(*cadences: str, max_series: int = 10, buffer_minutes: int = 0) -> RecurrenceCounter:
    return RecurrenceCounter(
        RecurrencePolicy(allowed_cadences=cadences, max_series_bookings=max_series),
        buffer_minutes=buffer_minutes,
    )


class TestRecurrenceCounter:
    """Tests for RecurrenceCounter.count and apply."""

    def test_no_conflicts_counts_up_to_maximum(self):
        counter = _counter("weekly")

        assert counter.count(START, END, Cadence.WEEKLY, [], FAR_HORIZON) == 10

    def test_conflict_stops_the_count(self):
        """A booking on the 7th occurrence (May 13) leaves six."""
        counter = _counter("weekly")

        assert counter.count(START, END, Cadence.WEEKLY, [_busy(2026, 5, 13)], FAR_HORIZON) == 6

    def test_count_stops_at_first_conflict_not_later_ones(self):
        """Free weeks after the first conflict are never counted."""
        counter = _counter("weekly")
        occupied = [_busy(2026, 5, 6), _busy(2026, 5, 20)]

        assert counter.count(START, END, Cadence.WEEKLY, occupied, FAR_HORIZON) == 5

    def test_bookings_before_the_slot_are_ignored(self):
        counter = _counter("weekly")

        assert counter.count(START, END, Cadence.WEEKLY, [_busy(2026, 3, 18)], FAR_HORIZON) == 10

    def test_bookings_at_other_times_are_ignored(self):
        counter = _counter("weekly")

        assert counter.count(START, END, Cadence.WEEKLY, [_busy(2026, 4, 15, hour=9)], FAR_HORIZON) == 10

    def test_horizon_cuts_the_count(self):
        """Only occurrences starting on or before the horizon are considered."""
        counter = _counter("weekly")

        assert counter.count(START, END, Cadence.WEEKLY, [], pendulum.date(2026, 4, 30)) == 5

    def test_none_cadence_counts_one(self):
        counter = _counter("none")

        assert counter.count(START, END, Cadence.NONE, [], FAR_HORIZON) == 1

    def test_buffer_extends_conflicts(self):
        """A booking starting 5 minutes after an occurrence only counts with a buffer."""
        occupied = [
            OccupiedInterval(
                start=pendulum.datetime(2026, 4, 15, 15, 5, tz="UTC"),
                end=pendulum.datetime(2026, 4, 15, 16, 0, tz="UTC"),
            )
        ]

        assert _counter("weekly").count(START, END, Cadence.WEEKLY, occupied, FAR_HORIZON) == 10
        assert _counter("weekly", buffer_minutes=10).count(
            START, END, Cadence.WEEKLY, occupied, FAR_HORIZON
        ) == 2

    def test_apply_takes_best_cadence(self):
        """Weekly is blocked on Apr 8, the monthly series is not."""
        counter = _counter("weekly", "monthly-date", max_series=4)
        slot = CandidateSlot(start=START, end=END, timezone="UTC")

        counter.apply([slot], [_busy(2026, 4, 8)], FAR_HORIZON)

        assert slot.available_recurrences == 4

    def test_apply_without_cadences_sets_zero(self):
        counter = _counter()
        slot = CandidateSlot(start=START, end=END, timezone="UTC", available_recurrences=3)

        counter.apply([slot], [], FAR_HORIZON)

        assert slot.available_recurrences == 0


class TestRecurrenceHorizon:
    """Tests for recurrence_horizon."""

    def test_weekly_horizon_covers_whole_series(self):
        """Nine weekly steps from Apr 30 reach Jul 2, plus a week of slack."""
        recurrence = RecurrencePolicy(allowed_cadences=("weekly",), max_series_bookings=10)

        assert recurrence_horizon(pendulum.date(2026, 4, 30), recurrence) == pendulum.date(2026, 7, 9)

    def test_longest_cadence_wins(self):
        recurrence = RecurrencePolicy(allowed_cadences=("weekly", "monthly-date"), max_series_bookings=3)

        assert recurrence_horizon(pendulum.date(2026, 4, 30), recurrence) == pendulum.date(2026, 7, 7)

    def test_disabled_recurrence_keeps_date_to(self):
        date_to = pendulum.date(2026, 4, 30)

        assert recurrence_horizon(date_to, RecurrencePolicy()) == date_to
        assert recurrence_horizon(
            date_to, RecurrencePolicy(allowed_cadences=("weekly",), max_series_bookings=1)
        ) == date_to

    def test_none_cadence_keeps_date_to(self):
        date_to = pendulum.date(2026, 4, 30)
        recurrence = RecurrencePolicy(allowed_cadences=("none",), max_series_bookings=5)

        assert recurrence_horizon(date_to, recurrence) == date_to
