"""
Unit tests for calendar arithmetic and rounding helpers.
"""
import pytest
from datetime import date, datetime

from goal_forecast.calendar_math import (
    add_days,
    day_of_year,
    days_in_year,
    diff_days,
    end_of_year,
    is_leap_year,
    js_round,
    parse_iso_date,
    parse_local_datetime,
    start_of_year,
    whole_days_between,
)


class TestLeapYears:
    """Test leap year detection and year lengths."""

    @pytest.mark.parametrize("year,expected", [
        (2024, True),
        (2025, False),
        (2000, True),
        (1900, False),
    ])
    def test_is_leap_year(self, year, expected):
        """Test the Gregorian leap year rule including century exceptions."""
        assert is_leap_year(year) is expected

    def test_days_in_year(self):
        """Test that leap years have 366 days."""
        assert days_in_year(2024) == 366
        assert days_in_year(2025) == 365

    def test_day_of_year_last_day_of_leap_year(self):
        """Test that Dec 31 of a leap year is day 366."""
        assert day_of_year(date(2024, 12, 31)) == 366
        assert day_of_year(date(2025, 12, 31)) == 365

    def test_day_of_year_first_day(self):
        """Test that Jan 1 is day 1."""
        assert day_of_year(datetime(2025, 1, 1, 23, 0)) == 1


class TestDayArithmetic:
    """Test day differences and additions."""

    def test_year_boundaries(self):
        """Test start and end of year instants."""
        assert start_of_year(2025) == datetime(2025, 1, 1)
        assert end_of_year(2025) == datetime(2025, 12, 31, 23, 59, 59, 999000)

    def test_diff_days_is_fractional(self):
        """Test that half a day is reported as 0.5."""
        assert diff_days(datetime(2025, 1, 1), datetime(2025, 1, 1, 12)) == 0.5

    def test_whole_days_between_floors(self):
        """Test that whole days are floored."""
        assert whole_days_between(datetime(2025, 1, 1), datetime(2025, 1, 3, 23)) == 2

    def test_whole_days_between_never_negative(self):
        """Test that a reversed range yields zero."""
        assert whole_days_between(datetime(2025, 2, 1), datetime(2025, 1, 1)) == 0

    def test_add_days_drops_fraction(self):
        """Test that fractional days are truncated when adding."""
        assert add_days(datetime(2025, 1, 1, 12), 6.9) == datetime(2025, 1, 7, 12)


class TestParsing:
    """Test parsing of local timestamps."""

    def test_parse_plain_timestamp(self):
        """Test an ISO local timestamp without zone."""
        assert parse_local_datetime("2025-07-02T12:00:00") == datetime(2025, 7, 2, 12)

    def test_parse_strips_z_suffix(self):
        """Test that a trailing Z keeps the wall-clock time."""
        assert parse_local_datetime("2025-07-02T12:00:00Z") == datetime(2025, 7, 2, 12)

    def test_parse_strips_offset(self):
        """Test that a UTC offset is dropped, not converted."""
        parsed = parse_local_datetime("2025-07-02T12:00:00+02:00")
        assert parsed == datetime(2025, 7, 2, 12)
        assert parsed.tzinfo is None

    def test_parse_date_only(self):
        """Test that a date string parses to midnight."""
        assert parse_local_datetime("2025-07-02") == datetime(2025, 7, 2)

    def test_parse_accepts_date_objects(self):
        """Test that date and datetime values pass through."""
        assert parse_local_datetime(date(2025, 7, 2)) == datetime(2025, 7, 2)
        assert parse_local_datetime(datetime(2025, 7, 2, 8)) == datetime(2025, 7, 2, 8)

    @pytest.mark.parametrize("value", ["", "   ", "not-a-date", None, 12345])
    def test_parse_rejects_invalid(self, value):
        """Test that empty or malformed values raise ValueError."""
        with pytest.raises(ValueError):
            parse_local_datetime(value)

    def test_parse_iso_date(self):
        """Test date extraction from a full timestamp."""
        assert parse_iso_date("2025-07-02T23:59:00") == date(2025, 7, 2)


class TestJsRound:
    """Test half-up rounding."""

    def test_half_rounds_up(self):
        """Test that .5 rounds up, unlike banker's rounding."""
        assert js_round(2.5, 0) == 3
        assert js_round(0.125, 2) == 0.13

    def test_negative_half_rounds_toward_positive(self):
        """Test that -2.5 rounds to -2."""
        assert js_round(-2.5, 0) == -2

    def test_zero_digits_returns_int(self):
        """Test that rounding to whole numbers yields an int."""
        result = js_round(3.7, 0)
        assert result == 4
        assert isinstance(result, int)

    def test_default_one_decimal(self):
        """Test the default precision of one decimal."""
        assert js_round(12.34) == 12.3
