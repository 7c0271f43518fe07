"""
Tests for the month overview.
"""

import pendulum

from freeslots.domain.models import CandidateSlot
from freeslots.domain.month_summary import build_month_summary, day_status


def _slots(day, count: int):
    start = pendulum.datetime(day.year, day.month, day.day, 9, 0, tz="UTC")
    return [
        CandidateSlot(start=start.add(hours=i), end=start.add(hours=i, minutes=30), timezone="UTC")
        for i in range(count)
    ]


class TestDayStatus:
    """Tests for day_status thresholds."""

    def test_no_free_slots(self):
        assert day_status(0, 4) == "none"
        assert day_status(0, 0) == "none"

    def test_more_than_half_is_available(self):
        assert day_status(3, 4) == "available"
        assert day_status(1, 1) == "available"

    def test_half_or_less_is_partial(self):
        assert day_status(2, 4) == "partial"
        assert day_status(1, 4) == "partial"


class TestBuildMonthSummary:
    """Tests for build_month_summary."""

    def test_covers_every_day_of_the_month(self):
        summary = build_month_summary([], [], pendulum.date(2026, 2, 14))

        assert (summary.year, summary.month) == (2026, 2)
        assert len(summary.days) == 28
        assert summary.days[0].date == pendulum.date(2026, 2, 1)
        assert summary.days[-1].date == pendulum.date(2026, 2, 28)
        assert all(day.status == "none" for day in summary.days)

    def test_counts_and_statuses(self):
        april_1 = pendulum.date(2026, 4, 1)
        april_2 = pendulum.date(2026, 4, 2)
        generated_1 = _slots(april_1, 4)
        generated_2 = _slots(april_2, 4)

        summary = build_month_summary(
            generated_1 + generated_2,
            generated_1[:3] + generated_2[:2],
            april_1,
        )

        first, second, third = summary.days[:3]
        assert (first.available_count, first.status) == (3, "available")
        assert (second.available_count, second.status) == (2, "partial")
        assert (third.available_count, third.status) == (0, "none")

    def test_to_dict_shape(self):
        april_1 = pendulum.date(2026, 4, 1)
        slots = _slots(april_1, 2)

        data = build_month_summary(slots, slots, april_1).to_dict()

        assert data["year"] == 2026
        assert data["month"] == 4
        assert data["days"][0] == {"date": "2026-04-01", "availableCount": 2, "status": "available"}
        assert len(data["days"]) == 30
