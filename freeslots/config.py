"""
Configuration loading and validation with pydantic and YAML.
"""

from datetime import date
from pathlib import Path
from typing import Dict, List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import (
    WEEKDAYS,
    Cadence,
    DateRange,
    RecurrencePolicy,
    SlotPolicy,
    TimeRange,
    WeeklyAvailability,
)


class TimeRangeConfig(BaseModel):
    """Wall-clock availability window ("HH:MM")."""
    start: str
    end: str

    @model_validator(mode="after")
    def validate_range(self) -> "TimeRangeConfig":
        """Ensure both times parse and the window opens before it closes."""
        self.to_time_range()
        return self

    def to_time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)


class BlockDateConfig(BaseModel):
    """Blocked calendar dates, both ends inclusive."""
    start: date
    end: date

    @model_validator(mode="after")
    def validate_order(self) -> "BlockDateConfig":
        if self.end < self.start:
            raise ValueError("block date end must not be before its start")
        return self


class PolicyConfig(BaseModel):
    """Slot and recurrence settings of a booking template."""
    slot_duration: int = 30
    buffer_time: int = 0
    advance_booking_days: int = 90
    min_notice_hours: int = 24
    allowed_start_minutes: List[int] = Field(default_factory=list)
    block_dates: List[BlockDateConfig] = Field(default_factory=list)
    allowed_intervals: List[str] = Field(default_factory=list)
    max_series_bookings: int = 1
    weekly_availability: Dict[str, List[TimeRangeConfig]] = Field(default_factory=dict)

    @field_validator("slot_duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("slot_duration must be greater than zero")
        return value

    @field_validator("buffer_time", "advance_booking_days", "min_notice_hours", "max_series_bookings")
    @classmethod
    def validate_not_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Value must not be negative, got {value}")
        return value

    @field_validator("allowed_start_minutes")
    @classmethod
    def validate_minutes(cls, value: List[int]) -> List[int]:
        """Ensure minute marks are within an hour, sorted and deduplicated."""
        invalid = [minute for minute in value if not 0 <= minute <= 59]
        if invalid:
            raise ValueError(f"allowed_start_minutes must be between 0 and 59, got {invalid}")
        return sorted(set(value))

    @field_validator("allowed_intervals")
    @classmethod
    def validate_intervals(cls, value: List[str]) -> List[str]:
        """Normalize cadence names, rejecting unknown ones."""
        return [Cadence.parse(name).value for name in value]

    @field_validator("weekly_availability")
    @classmethod
    def validate_weekdays(cls, value: Dict[str, List[TimeRangeConfig]]) -> Dict[str, List[TimeRangeConfig]]:
        normalized = {day.lower(): ranges for day, ranges in value.items()}
        unknown = [day for day in normalized if day not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(sorted(unknown))}")
        return normalized

    def to_policy(self, timezone: str) -> SlotPolicy:
        """Build the immutable domain policy."""
        return SlotPolicy(
            slot_duration=self.slot_duration,
            buffer_time=self.buffer_time,
            advance_booking_days=self.advance_booking_days,
            min_notice_hours=self.min_notice_hours,
            allowed_start_minutes=tuple(self.allowed_start_minutes),
            block_dates=tuple(DateRange(start=b.start, end=b.end) for b in self.block_dates),
            timezone=timezone,
            weekly_availability=WeeklyAvailability(
                **{
                    day: tuple(window.to_time_range() for window in windows)
                    for day, windows in self.weekly_availability.items()
                }
            ),
            recurrence=RecurrencePolicy(
                allowed_cadences=tuple(Cadence.parse(name) for name in self.allowed_intervals),
                max_series_bookings=self.max_series_bookings,
            ),
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    resource_id: int = 1
    tenant_id: int = 1
    store_file: Path = Path("bookings.json")
    policy: PolicyConfig = Field(default_factory=PolicyConfig)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if not config.store_file.is_absolute():
            config.store_file = config_path.parent / config.store_file
        return config

    def get_policy(self) -> SlotPolicy:
        return self.policy.to_policy(self.timezone)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
