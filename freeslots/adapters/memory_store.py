"""
In-memory booking store implementing both store protocols.
"""

from typing import Dict, List, Optional, Tuple

from pendulum import DateTime

from ..domain.models import OccupiedInterval, SeriesRecord, WeeklyAvailability

ResourceKey = Tuple[int, int]


class InMemoryIntervalStore:
    """
    Keeps occupied intervals, default schedules and series headers in memory.

    Records are partitioned by (resource_id, tenant_id); lookups never cross
    tenants. Ids are assigned incrementally, starting at 1.
    """

    def __init__(self) -> None:
        self._intervals: Dict[ResourceKey, List[OccupiedInterval]] = {}
        self._availability: Dict[ResourceKey, WeeklyAvailability] = {}
        self._series: Dict[int, SeriesRecord] = {}
        self._next_interval_id = 1
        self._next_series_id = 1

    def add_interval(
        self,
        resource_id: int,
        tenant_id: int,
        start: DateTime,
        end: DateTime,
        series_id: Optional[int] = None,
        position_in_series: Optional[int] = None,
        interval_id: Optional[int] = None,
    ) -> int:
        """Record an occupied interval and return its id."""
        if interval_id is None:
            interval_id = self._next_interval_id
        self._next_interval_id = max(self._next_interval_id, interval_id + 1)

        interval = OccupiedInterval(
            start=start,
            end=end,
            id=interval_id,
            series_id=series_id,
            position_in_series=position_in_series,
        )
        self._intervals.setdefault((resource_id, tenant_id), []).append(interval)
        return interval_id

    def set_default_availability(
        self,
        resource_id: int,
        tenant_id: int,
        availability: WeeklyAvailability,
    ) -> None:
        self._availability[(resource_id, tenant_id)] = availability

    def fetch_occupied_intervals(
        self,
        resource_id: int,
        tenant_id: int,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[OccupiedInterval]:
        """Return intervals overlapping the window, ordered by start."""
        matching = [
            interval
            for interval in self._intervals.get((resource_id, tenant_id), [])
            if interval.start < window_end and interval.end > window_start
        ]
        return sorted(matching, key=lambda interval: interval.start)

    def fetch_default_availability(
        self,
        resource_id: int,
        tenant_id: int,
    ) -> Optional[WeeklyAvailability]:
        return self._availability.get((resource_id, tenant_id))

    def create_series(self, record: SeriesRecord) -> int:
        series_id = self._next_series_id
        self._next_series_id += 1
        self._series[series_id] = record
        return series_id

    def create_occupied_interval(
        self,
        resource_id: int,
        tenant_id: int,
        start: DateTime,
        end: DateTime,
        series_id: int,
        position_in_series: int,
    ) -> int:
        return self.add_interval(
            resource_id,
            tenant_id,
            start,
            end,
            series_id=series_id,
            position_in_series=position_in_series,
        )

    def get_series(self, series_id: int) -> Optional[SeriesRecord]:
        return self._series.get(series_id)

    def all_intervals(self, resource_id: int, tenant_id: int) -> List[OccupiedInterval]:
        """All intervals of a resource, in insertion order."""
        return list(self._intervals.get((resource_id, tenant_id), []))
