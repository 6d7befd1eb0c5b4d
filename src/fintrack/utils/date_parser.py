"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and the
    relative forms "today", "yesterday", "tomorrow", and "last/this/next"
    followed by "week", "month" or "year" (first day of that period).

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    offsets = {"last": -1, "this": 0, "next": 1}
    words = date_str.split()
    if len(words) == 2 and words[0] in offsets:
        offset = offsets[words[0]]
        period = words[1]
        if period == "week":
            return today - timedelta(days=today.weekday()) + timedelta(weeks=offset)
        if period == "month":
            return today.replace(day=1) + relativedelta(months=offset)
        if period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=offset)
        raise ValueError(f"Could not parse date '{date_str}': unknown period '{period}'")

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 (or similar) timestamp string, returning None if it is not one."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date_parser.isoparse(value.strip())
    except ValueError:
        pass
    try:
        return date_parser.parse(value.strip())
    except (ValueError, OverflowError):
        return None
