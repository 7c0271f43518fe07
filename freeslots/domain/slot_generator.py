"""
Core business logic for tiling availability windows into bookable slots.

Pure domain logic: no store access, no clock reads. The caller passes the
resolved schedule and the single "now" used for the whole request.
"""

from datetime import date
from typing import List, Optional

import pendulum
from pendulum import DateTime, Timezone

from .models import CandidateSlot, SlotPolicy, TimeRange, WeeklyAvailability


class SlotGenerator:
    """
    Generates fixed-duration candidate slots for a date range.

    Algorithm, per day and per availability window:
    1. Snap the window start to the allowed-minute grid (if configured)
    2. Stop once a slot would run past the window end
    3. Skip slots outside the notice/advance window or on a blocked date
    4. Advance to the next start: end + buffer, or the next grid minute
    """

    def __init__(self, policy: SlotPolicy, tz: Timezone):
        self.policy = policy
        self.tz = tz

    def generate(
        self,
        date_from: date,
        date_to: date,
        availability: WeeklyAvailability,
        now: DateTime,
    ) -> List[CandidateSlot]:
        """
        Generate all candidate slots between two dates (inclusive).

        Args:
            date_from: First calendar day to tile
            date_to: Last calendar day to tile
            availability: Resolved weekly schedule
            now: Current time for the notice and advance-booking checks

        Returns:
            Slots ordered by day, then by window, then by start time
        """
        slots: List[CandidateSlot] = []

        current = pendulum.date(date_from.year, date_from.month, date_from.day)
        while current <= date_to:
            for window in availability.for_weekday(current.weekday()):
                slots.extend(self._tile_window(current, window, now))
            current = current.add(days=1)

        return slots

    def _tile_window(self, day: date, window: TimeRange, now: DateTime) -> List[CandidateSlot]:
        slots: List[CandidateSlot] = []
        duration = self.policy.slot_duration

        slot_start: Optional[DateTime] = self._at(day, window.start_time.hour, window.start_time.minute)
        window_end = self._at(day, window.end_time.hour, window.end_time.minute)

        if self.policy.allowed_start_minutes:
            slot_start = self._align_to_allowed_minute(slot_start)

        while slot_start is not None and slot_start < window_end:
            slot_end = slot_start.add(minutes=duration)

            if slot_end > window_end:
                break

            if self.is_bookable(slot_start, now) and not self.is_date_blocked(slot_start.date()):
                slots.append(
                    CandidateSlot(start=slot_start, end=slot_end, timezone=self.tz.name)
                )

            slot_start = self._next_start(slot_start, slot_end)

        return slots

    def _at(self, day: date, hour: int, minute: int) -> DateTime:
        return pendulum.datetime(day.year, day.month, day.day, hour, minute, tz=self.tz)

    def _align_to_allowed_minute(self, moment: DateTime) -> DateTime:
        """Snap forward to the next allowed minute mark, rolling into the next hour if needed."""
        minutes = self.policy.allowed_start_minutes

        for allowed in minutes:
            if allowed >= moment.minute:
                return moment.set(minute=allowed, second=0, microsecond=0)

        return moment.add(hours=1).set(minute=minutes[0], second=0, microsecond=0)

    def _next_start(self, slot_start: DateTime, slot_end: DateTime) -> Optional[DateTime]:
        """
        Return where the next slot of the same window starts.

        Without a grid slots tile back to back, separated by the buffer.
        With a grid and no buffer, grid slots may overlap: the next start is
        simply the next grid minute after the current start. Returns None when
        no grid minute is left on this day.
        """
        buffer_time = self.policy.buffer_time

        if not self.policy.allowed_start_minutes:
            return slot_end.add(minutes=buffer_time)

        if buffer_time == 0:
            earliest = slot_start.add(minutes=1)
        else:
            earliest = slot_end.add(minutes=buffer_time)

        for hour in range(slot_start.hour, 24):
            for allowed in self.policy.allowed_start_minutes:
                candidate = slot_start.set(hour=hour, minute=allowed)
                if candidate >= earliest:
                    return candidate

        return None

    def is_bookable(self, slot_start: DateTime, now: DateTime) -> bool:
        """Check the minimum notice and the advance booking horizon."""
        earliest = now.add(hours=self.policy.min_notice_hours)
        latest = now.add(days=self.policy.advance_booking_days)
        return earliest <= slot_start <= latest

    def is_date_blocked(self, day: date) -> bool:
        """Check whether a calendar day falls inside any blocked range (inclusive)."""
        return any(blocked.contains(day) for blocked in self.policy.block_dates)
