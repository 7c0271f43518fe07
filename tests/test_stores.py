"""
Tests for the in-memory and JSON stores.
"""

import json

import pendulum
import pytest

from freeslots.adapters.json_store import JsonIntervalStore
from freeslots.adapters.memory_store import InMemoryIntervalStore
from freeslots.domain.exceptions import StoreError
from freeslots.domain.models import Cadence, SeriesRecord, TimeRange, WeeklyAvailability

START = pendulum.datetime(2026, 4, 1, 10, 0, tz="Europe/Berlin")


def _series(start=START) -> SeriesRecord:
    return SeriesRecord(
        resource_id=1,
        tenant_id=1,
        cadence=Cadence.WEEKLY,
        start=start,
        end=start.add(hours=1),
        last_date=start.add(weeks=1, hours=1),
        title="Standup",
    )


class TestInMemoryIntervalStore:
    """Tests for InMemoryIntervalStore."""

    def test_fetch_returns_overlapping_intervals_sorted(self):
        store = InMemoryIntervalStore()
        store.add_interval(1, 1, START.add(hours=3), START.add(hours=4))
        store.add_interval(1, 1, START, START.add(hours=1))
        store.add_interval(1, 1, START.add(days=2), START.add(days=2, hours=1))

        intervals = store.fetch_occupied_intervals(1, 1, START.subtract(hours=1), START.add(hours=5))

        assert [interval.start for interval in intervals] == [START, START.add(hours=3)]

    def test_touching_intervals_do_not_overlap_window(self):
        store = InMemoryIntervalStore()
        store.add_interval(1, 1, START, START.add(hours=1))

        assert store.fetch_occupied_intervals(1, 1, START.add(hours=1), START.add(hours=2)) == []

    def test_tenants_are_isolated(self):
        store = InMemoryIntervalStore()
        store.add_interval(1, 1, START, START.add(hours=1))
        store.set_default_availability(1, 1, WeeklyAvailability.all_day())

        assert store.fetch_occupied_intervals(1, 2, START, START.add(hours=1)) == []
        assert store.fetch_default_availability(1, 2) is None
        assert store.fetch_default_availability(1, 1) == WeeklyAvailability.all_day()

    def test_ids_are_incremental(self):
        store = InMemoryIntervalStore()

        assert store.add_interval(1, 1, START, START.add(hours=1)) == 1
        assert store.add_interval(1, 1, START.add(hours=2), START.add(hours=3), interval_id=10) == 10
        assert store.add_interval(1, 1, START.add(hours=4), START.add(hours=5)) == 11
        assert store.create_series(_series()) == 1
        assert store.create_series(_series()) == 2


class TestJsonIntervalStore:
    """Tests for JsonIntervalStore."""

    def test_missing_file_is_empty_store(self, tmp_path):
        store = JsonIntervalStore(tmp_path / "missing.json")

        assert store.all_intervals(1, 1) == []
        assert not (tmp_path / "missing.json").exists()

    def test_writes_survive_reload(self, tmp_path):
        path = tmp_path / "bookings.json"
        store = JsonIntervalStore(path)
        series_id = store.create_series(_series())
        store.create_occupied_interval(1, 1, START, START.add(hours=1), series_id, 1)

        reloaded = JsonIntervalStore(path)

        intervals = reloaded.all_intervals(1, 1)
        assert len(intervals) == 1
        assert intervals[0].start == START
        assert intervals[0].series_id == series_id
        assert intervals[0].position_in_series == 1
        assert reloaded.get_series(series_id).title == "Standup"
        assert reloaded.get_series(series_id).cadence is Cadence.WEEKLY

    def test_ids_continue_after_reload(self, tmp_path):
        path = tmp_path / "bookings.json"
        store = JsonIntervalStore(path)
        series_id = store.create_series(_series())
        first_id = store.create_occupied_interval(1, 1, START, START.add(hours=1), series_id, 1)

        reloaded = JsonIntervalStore(path)

        assert reloaded.create_series(_series()) == series_id + 1
        assert reloaded.create_occupied_interval(
            1, 1, START.add(hours=2), START.add(hours=3), series_id + 1, 1
        ) == first_id + 1

    def test_reads_default_availability(self, tmp_path):
        path = tmp_path / "bookings.json"
        path.write_text(json.dumps({
            "availability": [
                {"resource_id": 1, "tenant_id": 1, "weekly_availability": {"monday": [{"start": "09:00", "end": "12:00"}]}}
            ],
        }))

        store = JsonIntervalStore(path)

        assert store.fetch_default_availability(1, 1).monday == (TimeRange(start="09:00", end="12:00"),)

    def test_malformed_json_raises_store_error(self, tmp_path):
        path = tmp_path / "bookings.json"
        path.write_text("{not json")

        with pytest.raises(StoreError, match="Could not read"):
            JsonIntervalStore(path)

    def test_invalid_record_raises_store_error(self, tmp_path):
        path = tmp_path / "bookings.json"
        path.write_text(json.dumps({"intervals": [{"resource_id": 1, "tenant_id": 1}]}))

        with pytest.raises(StoreError, match="Invalid record"):
            JsonIntervalStore(path)

    def test_root_must_be_an_object(self, tmp_path):
        path = tmp_path / "bookings.json"
        path.write_text("[]")

        with pytest.raises(StoreError):
            JsonIntervalStore(path)
