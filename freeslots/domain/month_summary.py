"""
Calendar overview data: a coarse availability status per day of a month.
"""

from collections import Counter
from datetime import date
from typing import List, Sequence

import pendulum

from .models import CandidateSlot, DayData, MonthSummary

STATUS_NONE = "none"
STATUS_PARTIAL = "partial"
STATUS_AVAILABLE = "available"


def day_status(available_count: int, total_count: int) -> str:
    """More than half of the day's generated slots free -> available."""
    if available_count == 0:
        return STATUS_NONE
    if available_count / max(total_count, 1) > 0.5:
        return STATUS_AVAILABLE
    return STATUS_PARTIAL


def build_month_summary(
    generated: Sequence[CandidateSlot],
    available: Sequence[CandidateSlot],
    month_of: date,
) -> MonthSummary:
    """
    Classify every day of the month containing ``month_of``.

    Args:
        generated: All slots produced before conflict filtering
        available: Slots left after conflict filtering
        month_of: Any date inside the month to summarize
    """
    total_by_date = Counter(slot.date for slot in generated)
    available_by_date = Counter(slot.date for slot in available)

    first_day = pendulum.date(month_of.year, month_of.month, 1)
    days: List[DayData] = []

    current = first_day
    while current.month == first_day.month:
        available_count = available_by_date.get(current, 0)
        days.append(
            DayData(
                date=current,
                available_count=available_count,
                status=day_status(available_count, total_by_date.get(current, 0)),
            )
        )
        current = current.add(days=1)

    return MonthSummary(year=first_day.year, month=first_day.month, days=tuple(days))
