"""Tests for date parsing and formatting."""

import pytest
from datetime import date, datetime

from lotledger.utils.date_parser import days_between, format_date, parse_date, start_of_day

NOW = datetime(2024, 3, 10, 15, 45)


def test_parse_iso_date():
    """Test that ISO dates are read year-month-day."""
    assert parse_date("2024-01-02") == datetime(2024, 1, 2)


def test_parse_day_first_date():
    """Test that slash dates are read day first."""
    assert parse_date("02/01/2024") == datetime(2024, 1, 2)
    assert parse_date("15/01/2024") == datetime(2024, 1, 15)


def test_parse_month_name():
    assert parse_date("January 15, 2024") == datetime(2024, 1, 15)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("today", datetime(2024, 3, 10)),
        ("Yesterday", datetime(2024, 3, 9)),
        (" tomorrow ", datetime(2024, 3, 11)),
    ],
)
def test_parse_relative_words(text, expected):
    """Test relative words resolve against the reference time at midnight."""
    assert parse_date(text, now=NOW) == expected


def test_parse_invalid_date():
    """Test that garbage raises ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date")


def test_start_of_day():
    assert start_of_day(date(2024, 3, 10)) == datetime(2024, 3, 10, 0, 0)


def test_format_date_for_notes():
    assert format_date(datetime(2024, 3, 1, 23, 59)) == "01/03/2024"


def test_days_between_ignores_time_of_day():
    assert days_between(NOW, datetime(2024, 3, 15, 0, 1)) == 5
    assert days_between(NOW, datetime(2024, 3, 9, 23, 0)) == -1
