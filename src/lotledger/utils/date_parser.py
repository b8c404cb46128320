"""Date parsing, formatting and arithmetic utilities."""

from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser

NOTE_DATE_FORMAT = "%d/%m/%Y"


def parse_date(date_str: str, now: Optional[datetime] = None) -> datetime:
    """Parse a date string into a datetime at midnight.

    Supports absolute dates ("2024-01-15", "15/01/2024", "January 15, 2024")
    and the relative words "today", "yesterday" and "tomorrow". Day-first is
    assumed for ambiguous numeric dates.

    Args:
        date_str: Date string
        now: Reference time for relative words (defaults to the current time)

    Returns:
        Naive datetime at 00:00

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = (now or datetime.now()).date()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return start_of_day(relative_dates[date_str])

    # dayfirst would read "2024-01-02" as 1 February, so ISO goes first
    try:
        return start_of_day(date_parser.isoparse(date_str).date())
    except ValueError:
        pass

    try:
        dt = date_parser.parse(date_str, dayfirst=True)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
    return start_of_day(dt.date())


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def format_date(value: datetime) -> str:
    """Format a timestamp for text stored in transaction notes.

    The output is deterministic for a given timestamp; changing this format
    changes the notes written from now on.
    """
    return value.strftime(NOTE_DATE_FORMAT)


def days_between(start: datetime, end: datetime) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if ``end`` is earlier)."""
    return (end.date() - start.date()).days
