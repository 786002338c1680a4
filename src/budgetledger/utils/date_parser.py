"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from dateutil import parser as date_parser

_DAYS_AGO = re.compile(r"^(\d+) days? ago$")


def parse_date(value: str | date | datetime, dayfirst: bool = False) -> date:
    """Parse a date value into a date object.

    Supports:
    - date and datetime objects (datetimes are truncated)
    - ISO dates: "2024-01-15"
    - Free-form dates understood by dateutil: "15/01/2024", "Jan 15, 2024"
    - Relative dates: "today", "yesterday", "tomorrow", "3 days ago"

    Args:
        value: Date value
        dayfirst: Read ambiguous numeric dates as day/month (bank exports)

    Returns:
        Date object

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or not str(value).strip():
        raise ValueError("Empty date string")

    date_str = str(value).strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    days_ago = _DAYS_AGO.match(date_str)
    if days_ago:
        return today - timedelta(days=int(days_ago.group(1)))

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}") from e
