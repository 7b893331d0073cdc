"""Tests for date parser."""

from datetime import date, datetime

import pytest

from groomer.utils.date_parser import parse_date, parse_datetime, parse_time, parse_window

# Wednesday
TODAY = date(2025, 3, 12)


def test_parse_relative_dates():
    assert parse_date("today", TODAY) == TODAY
    assert parse_date("Yesterday", TODAY) == date(2025, 3, 11)
    assert parse_date("tomorrow", TODAY) == date(2025, 3, 13)


def test_parse_next_and_last_weekday():
    assert parse_date("next friday", TODAY) == date(2025, 3, 14)
    assert parse_date("next wednesday", TODAY) == date(2025, 3, 19)
    assert parse_date("last monday", TODAY) == date(2025, 3, 10)
    assert parse_date("last wednesday", TODAY) == date(2025, 3, 5)


def test_parse_absolute_dates():
    assert parse_date("2025-03-10") == date(2025, 3, 10)
    assert parse_date("March 10, 2025") == date(2025, 3, 10)


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_parse_time():
    assert parse_time("09:30").hour == 9
    with pytest.raises(ValueError):
        parse_time("25:00")


def test_parse_datetime_forms():
    assert parse_datetime("2025-03-10T09:00") == datetime(2025, 3, 10, 9, 0)
    assert parse_datetime("2025-03-10 09:00") == datetime(2025, 3, 10, 9, 0)
    assert parse_datetime("tomorrow 10:15", TODAY) == datetime(2025, 3, 13, 10, 15)
    assert parse_datetime("next monday 08:00", TODAY) == datetime(2025, 3, 17, 8, 0)
    assert parse_datetime("2025-03-10") == datetime(2025, 3, 10)


def test_parse_datetime_now_is_naive():
    value = parse_datetime("now")
    assert value.tzinfo is None
    assert value.microsecond == 0


def test_parse_datetime_rejects_zone():
    with pytest.raises(ValueError, match="local time"):
        parse_datetime("2025-03-10T09:00:00+00:00")


def test_parse_window():
    start, end = parse_window("week", "2025-03-12")
    assert start == datetime(2025, 3, 10)
    assert end.date() == date(2025, 3, 16)
    with pytest.raises(ValueError):
        parse_window("decade", "2025-03-12")
