"""
Stepping rules for recurring occurrences.

The same functions drive the recurrence counter (read side) and the series
materializer (write side), so both always agree on where an occurrence lands.
"""

from typing import Callable, Dict, Iterator, Optional, Tuple

from pendulum import DateTime

from .models import Cadence


def add_week(moment: DateTime) -> DateTime:
    return moment.add(days=7)


def add_month_same_date(moment: DateTime) -> DateTime:
    """Same day of month; days past the end of the target month clamp to its last day."""
    return moment.add(months=1)


def add_year(moment: DateTime) -> DateTime:
    return moment.add(years=1)


def add_month_same_weekday(moment: DateTime) -> DateTime:
    """
    Step to the same weekday occurrence in the next month.

    Example: the 2nd Thursday of March -> the 2nd Thursday of April.
    When the target month has no such occurrence (a 5th Monday), the
    result falls back one week to the last matching weekday.
    """
    occurrence = (moment.day - 1) // 7 + 1

    first_of_month = moment.set(day=1).add(months=1)
    days_until_weekday = (moment.weekday() - first_of_month.weekday()) % 7
    target = first_of_month.add(days=days_until_weekday + 7 * (occurrence - 1))

    if target.month != first_of_month.month:
        target = target.subtract(days=7)

    return target


_STEPPERS: Dict[Cadence, Callable[[DateTime], DateTime]] = {
    Cadence.WEEKLY: add_week,
    Cadence.MONTHLY_DATE: add_month_same_date,
    Cadence.MONTHLY_DAY: add_month_same_weekday,
    Cadence.YEARLY: add_year,
}


def next_occurrence(cadence: Cadence, moment: DateTime) -> Optional[DateTime]:
    """
    Return the start of the occurrence following ``moment``.

    ``Cadence.NONE`` has no following occurrence and returns None.
    """
    stepper = _STEPPERS.get(cadence)
    if stepper is None:
        return None
    return stepper(moment)


def iter_occurrences(
    start: DateTime,
    end: DateTime,
    cadence: Cadence,
    limit: int,
) -> Iterator[Tuple[DateTime, DateTime]]:
    """
    Yield up to ``limit`` (start, end) pairs, beginning with the given one.

    Every occurrence keeps the duration of the first.
    """
    duration_seconds = int((end - start).total_seconds())
    current: Optional[DateTime] = start
    produced = 0

    while current is not None and produced < limit:
        yield current, current.add(seconds=duration_seconds)
        produced += 1
        current = next_occurrence(cadence, current)
