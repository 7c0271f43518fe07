"""
JSON-file backed booking store for the command line.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import pendulum
from pendulum import DateTime

from ..domain.exceptions import StoreError
from ..domain.models import Cadence, SeriesRecord, WeeklyAvailability
from .memory_store import InMemoryIntervalStore

logger = logging.getLogger(__name__)


def _parse_datetime(value: Any) -> DateTime:
    parsed = pendulum.parse(str(value))
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Expected a date and time, got '{value}'")
    return parsed


class JsonIntervalStore(InMemoryIntervalStore):
    """
    Store persisted as a single JSON document.

    Layout::

        {
          "availability": [{"resource_id": 1, "tenant_id": 1, "weekly_availability": {...}}],
          "intervals": [{"id": 1, "resource_id": 1, "tenant_id": 1,
                         "start": "2026-04-01T10:00:00+02:00", "end": "...",
                         "series_id": null, "position_in_series": null}],
          "series": [{"id": 1, "resource_id": 1, "tenant_id": 1, "cadence": "weekly",
                      "start": "...", "end": "...", "last_date": "...", "title": ""}]
        }

    A missing file is an empty store; it is created on the first write.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug("Store file %s does not exist yet, starting empty", self.path)
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Could not read store file {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StoreError(f"Store file {self.path} must contain a JSON object")

        try:
            for entry in data.get("availability", []):
                self.set_default_availability(
                    int(entry["resource_id"]),
                    int(entry["tenant_id"]),
                    WeeklyAvailability.from_dict(entry.get("weekly_availability")),
                )

            for entry in data.get("intervals", []):
                self.add_interval(
                    int(entry["resource_id"]),
                    int(entry["tenant_id"]),
                    _parse_datetime(entry["start"]),
                    _parse_datetime(entry["end"]),
                    series_id=entry.get("series_id"),
                    position_in_series=entry.get("position_in_series"),
                    interval_id=entry.get("id"),
                )

            for entry in data.get("series", []):
                series_id = int(entry["id"])
                self._series[series_id] = SeriesRecord(
                    resource_id=int(entry["resource_id"]),
                    tenant_id=int(entry["tenant_id"]),
                    cadence=Cadence.parse(entry["cadence"]),
                    start=_parse_datetime(entry["start"]),
                    end=_parse_datetime(entry["end"]),
                    last_date=_parse_datetime(entry["last_date"]),
                    title=entry.get("title", ""),
                    description=entry.get("description", ""),
                    location=entry.get("location", ""),
                )
                self._next_series_id = max(self._next_series_id, series_id + 1)
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"Invalid record in store file {self.path}: {exc}") from exc

    def _to_document(self) -> Dict[str, Any]:
        intervals = []
        for (resource_id, tenant_id), entries in self._intervals.items():
            for interval in entries:
                intervals.append(
                    {
                        "id": interval.id,
                        "resource_id": resource_id,
                        "tenant_id": tenant_id,
                        "start": interval.start.to_iso8601_string(),
                        "end": interval.end.to_iso8601_string(),
                        "series_id": interval.series_id,
                        "position_in_series": interval.position_in_series,
                    }
                )

        return {
            "availability": [
                {
                    "resource_id": resource_id,
                    "tenant_id": tenant_id,
                    "weekly_availability": availability.to_dict(),
                }
                for (resource_id, tenant_id), availability in self._availability.items()
            ],
            "intervals": intervals,
            "series": [
                {
                    "id": series_id,
                    "resource_id": record.resource_id,
                    "tenant_id": record.tenant_id,
                    "cadence": record.cadence.value,
                    "start": record.start.to_iso8601_string(),
                    "end": record.end.to_iso8601_string(),
                    "last_date": record.last_date.to_iso8601_string(),
                    "title": record.title,
                    "description": record.description,
                    "location": record.location,
                }
                for series_id, record in self._series.items()
            ],
        }

    def save(self) -> None:
        """Write the whole store back to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._to_document(), f, indent=2)
        except OSError as exc:
            raise StoreError(f"Could not write store file {self.path}: {exc}") from exc

    def create_series(self, record: SeriesRecord) -> int:
        series_id = super().create_series(record)
        self.save()
        return series_id

    def create_occupied_interval(self, resource_id, tenant_id, start, end, series_id, position_in_series) -> int:
        interval_id = super().create_occupied_interval(
            resource_id, tenant_id, start, end, series_id, position_in_series
        )
        self.save()
        return interval_id
