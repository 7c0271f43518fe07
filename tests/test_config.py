"""
Tests for YAML configuration loading.
"""

from pathlib import Path

import pendulum
import pytest

from freeslots.config import AppConfig, PolicyConfig
from freeslots.domain.models import Cadence, TimeRange

EXAMPLE_CONFIG = Path(__file__).parent.parent / "config.example.yaml"


class TestAppConfig:
    """Tests for AppConfig.load_from_yaml and get_policy."""

    def test_load_example_config(self):
        config = AppConfig.load_from_yaml(EXAMPLE_CONFIG)
        policy = config.get_policy()

        assert config.timezone == "Europe/Berlin"
        assert policy.timezone == "Europe/Berlin"
        assert policy.slot_duration == 55
        assert policy.buffer_time == 5
        assert policy.allowed_start_minutes == (0, 30)
        assert policy.block_dates[0].contains(pendulum.date(2026, 12, 25))
        assert policy.recurrence.allowed_cadences == (Cadence.WEEKLY, Cadence.MONTHLY_DAY)
        assert policy.recurrence.max_series_bookings == 10
        assert policy.weekly_availability.monday[1] == TimeRange(start="13:00", end="17:00")
        assert policy.weekly_availability.tuesday == ()

    def test_store_file_is_relative_to_config(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("store_file: data/bookings.json\n")

        config = AppConfig.load_from_yaml(config_path)

        assert config.store_file == tmp_path / "data" / "bookings.json"

    def test_defaults(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("")

        policy = AppConfig.load_from_yaml(config_path).get_policy()

        assert policy.slot_duration == 30
        assert policy.buffer_time == 0
        assert policy.advance_booking_days == 90
        assert policy.min_notice_hours == 24
        assert policy.timezone == "UTC"
        assert not policy.recurrence.enabled
        assert not policy.weekly_availability.has_availability()

    def test_missing_file_raises_error(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "nope.yaml")

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("policy: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_root_must_be_mapping(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_path)


class TestPolicyConfig:
    """Tests for PolicyConfig validation."""

    def test_zero_duration_is_rejected(self):
        with pytest.raises(ValueError, match="slot_duration"):
            PolicyConfig(slot_duration=0)

    def test_negative_buffer_is_rejected(self):
        with pytest.raises(ValueError, match="must not be negative"):
            PolicyConfig(buffer_time=-1)

    def test_unknown_cadence_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown cadence"):
            PolicyConfig(allowed_intervals=["fortnightly"])

    def test_unknown_weekday_is_rejected(self):
        with pytest.raises(ValueError, match="Unknown weekday"):
            PolicyConfig(weekly_availability={"caturday": [{"start": "09:00", "end": "10:00"}]})

    def test_inverted_window_is_rejected(self):
        with pytest.raises(ValueError, match="must be before end time"):
            PolicyConfig(weekly_availability={"monday": [{"start": "12:00", "end": "09:00"}]})

    def test_minutes_are_normalized(self):
        assert PolicyConfig(allowed_start_minutes=[45, 15, 15]).allowed_start_minutes == [15, 45]

    def test_weekday_names_are_case_insensitive(self):
        policy = PolicyConfig(weekly_availability={"Friday": [{"start": "09:00", "end": "10:00"}]}).to_policy("UTC")

        assert policy.weekly_availability.friday == (TimeRange(start="09:00", end="10:00"),)

    def test_inverted_block_dates_are_rejected(self):
        with pytest.raises(ValueError, match="block date"):
            PolicyConfig(block_dates=[{"start": "2026-12-26", "end": "2026-12-24"}])
