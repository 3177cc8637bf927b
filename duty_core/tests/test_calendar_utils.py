"""Tests for calendar_utils helpers."""

from datetime import date, datetime

import pytest

from duty_core.calendar_utils import (
    day_of_week,
    format_date_key,
    is_same_month,
    is_same_week,
    is_time_in_range,
    parse_date,
    parse_hhmm_to_minutes,
    require_hhmm,
)


class TestParseDate:
    def test_accepts_date_datetime_and_string(self):
        assert parse_date(date(2024, 1, 1)) == date(2024, 1, 1)
        assert parse_date(datetime(2024, 1, 1, 7, 30)) == date(2024, 1, 1)
        assert parse_date("2024-01-01") == date(2024, 1, 1)
        assert parse_date("2024-01-01T07:00:00Z") == date(2024, 1, 1)

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_date("next monday")
        with pytest.raises(ValueError):
            parse_date("")

    def test_format_date_key(self):
        assert format_date_key(date(2024, 3, 5)) == "2024-03-05"


class TestDayOfWeek:
    def test_iso_numbering(self):
        assert day_of_week("2024-01-01") == 1  # Monday
        assert day_of_week("2024-01-07") == 7  # Sunday


class TestPeriods:
    def test_same_week_within_iso_week(self):
        assert is_same_week("2024-01-01", "2024-01-07")

    def test_monday_starts_new_week(self):
        assert not is_same_week("2024-01-07", "2024-01-08")

    def test_week_spanning_year_end(self):
        # 2024-12-30 and 2025-01-01 are both ISO week 1 of 2025.
        assert is_same_week("2024-12-30", "2025-01-01")

    def test_same_week_number_different_year(self):
        assert not is_same_week("2023-01-02", "2024-01-01")

    def test_same_month(self):
        assert is_same_month("2024-01-01", "2024-01-31")
        assert not is_same_month("2024-01-31", "2024-02-01")
        assert not is_same_month("2023-01-15", "2024-01-15")


class TestTimes:
    def test_parse_hhmm(self):
        assert parse_hhmm_to_minutes("07:30") == 450
        assert parse_hhmm_to_minutes("24:00") is None
        assert parse_hhmm_to_minutes("7") is None
        assert parse_hhmm_to_minutes(None) is None

    def test_require_hhmm(self):
        assert require_hhmm("06:00") == "06:00"
        with pytest.raises(ValueError):
            require_hhmm("6am")

    def test_range_start_inclusive_end_exclusive(self):
        assert is_time_in_range("06:00", "06:00", "09:00")
        assert is_time_in_range("08:59", "06:00", "09:00")
        assert not is_time_in_range("09:00", "06:00", "09:00")
        assert not is_time_in_range("05:59", "06:00", "09:00")

    def test_overnight_range(self):
        assert is_time_in_range("23:00", "22:00", "06:00")
        assert is_time_in_range("02:00", "22:00", "06:00")
        assert not is_time_in_range("12:00", "22:00", "06:00")

    def test_equal_bounds_are_empty(self):
        assert not is_time_in_range("07:00", "07:00", "07:00")
        assert not is_time_in_range("12:00", "07:00", "07:00")

    def test_invalid_bounds_never_match(self):
        assert not is_time_in_range("07:00", "bad", "09:00")
