"""Tests for 12-hour clock parsing and formatting."""

import pytest

from medibook.errors import FormatError
from medibook.time_utils import MINUTES_PER_DAY, canonical_clock_time, format_clock_time, parse_clock_time


class TestParseClockTime:
    """Tests for parse_clock_time."""

    @pytest.mark.parametrize("value,expected", [
        ("12:00 AM", 0),
        ("12:30 AM", 30),
        ("1:00 AM", 60),
        ("9:00 AM", 540),
        ("09:30 AM", 570),
        ("12:00 PM", 720),
        ("1:15 PM", 795),
        ("11:59 PM", 1439),
    ])
    def test_valid_times(self, value, expected):
        assert parse_clock_time(value) == expected

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_clock_time("  9:00 AM ") == 540

    @pytest.mark.parametrize("value", [
        "",
        "9:00",
        "09:00",
        "9 AM",
        "9:0 AM",
        "9:00 am",
        "9:00AM",
        "noon",
        "123:00 AM",
    ])
    def test_malformed_strings_raise(self, value):
        with pytest.raises(FormatError):
            parse_clock_time(value)

    @pytest.mark.parametrize("value", ["0:00 AM", "13:00 PM", "9:60 AM"])
    def test_out_of_range_parts_raise(self, value):
        with pytest.raises(FormatError):
            parse_clock_time(value)

    def test_non_string_raises(self):
        with pytest.raises(FormatError):
            parse_clock_time(None)


class TestFormatClockTime:
    """Tests for format_clock_time."""

    @pytest.mark.parametrize("minute,expected", [
        (0, "12:00 AM"),
        (5, "12:05 AM"),
        (540, "9:00 AM"),
        (720, "12:00 PM"),
        (780, "1:00 PM"),
        (1439, "11:59 PM"),
    ])
    def test_formats_canonically(self, minute, expected):
        assert format_clock_time(minute) == expected

    @pytest.mark.parametrize("minute", [-1, MINUTES_PER_DAY, 5000])
    def test_out_of_range_raises(self, minute):
        with pytest.raises(FormatError):
            format_clock_time(minute)


class TestRoundTrip:
    """Parsing and formatting are inverses on canonical input."""

    def test_every_minute_of_the_day(self):
        for minute in range(MINUTES_PER_DAY):
            assert parse_clock_time(format_clock_time(minute)) == minute

    @pytest.mark.parametrize("value", ["12:00 AM", "9:30 AM", "12:45 PM", "11:00 PM"])
    def test_canonical_strings(self, value):
        assert format_clock_time(parse_clock_time(value)) == value

    def test_canonical_drops_leading_zero(self):
        assert canonical_clock_time("09:00 AM") == "9:00 AM"
