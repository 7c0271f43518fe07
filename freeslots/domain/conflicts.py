"""
Overlap tests between candidate times and occupied intervals.
"""

from typing import Iterable, List, Sequence

from pendulum import DateTime

from .models import CandidateSlot, OccupiedInterval


def overlaps_interval(
    start: DateTime,
    end: DateTime,
    interval: OccupiedInterval,
    buffer_minutes: int = 0,
) -> bool:
    """
    Check whether [start, end) padded by the buffer on both sides overlaps an interval.

    Touching boundaries do not overlap: a slot may end exactly when the
    buffer before the next booking begins.
    """
    padded_start = start.subtract(minutes=buffer_minutes)
    padded_end = end.add(minutes=buffer_minutes)
    return padded_start < interval.end and padded_end > interval.start


def has_conflict(
    start: DateTime,
    end: DateTime,
    occupied: Iterable[OccupiedInterval],
    buffer_minutes: int = 0,
) -> bool:
    """Check a single occurrence against every occupied interval."""
    return any(
        overlaps_interval(start, end, interval, buffer_minutes)
        for interval in occupied
    )


def filter_conflicting_slots(
    slots: Sequence[CandidateSlot],
    occupied: Sequence[OccupiedInterval],
    buffer_minutes: int = 0,
) -> List[CandidateSlot]:
    """Keep only the slots that overlap no occupied interval."""
    return [
        slot for slot in slots
        if not has_conflict(slot.start, slot.end, occupied, buffer_minutes)
    ]
