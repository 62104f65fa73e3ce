"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

ISO_DATE_FORMAT = "%Y-%m-%d"

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def parse_iso_date(value: str | date, field_name: str = "date") -> date:
    """Parse a strict ``YYYY-MM-DD`` literal.

    This is the format every date crosses the frontend boundary in.

    Raises:
        ValueError: If the value is empty or not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(value.strip(), ISO_DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Invalid {field_name} '{value}': expected YYYY-MM-DD")


def parse_optional_iso_date(value: Optional[str | date], field_name: str = "date") -> Optional[date]:
    """Like parse_iso_date, but None or an empty string means no date."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_iso_date(value, field_name)


def format_iso_date(value: Optional[date]) -> Optional[str]:
    """Render a date as ``YYYY-MM-DD`` (None stays None)."""
    if value is None:
        return None
    return value.strftime(ISO_DATE_FORMAT)


def parse_date(date_str: str) -> date:
    """Parse a user-typed date for the command line.

    Accepts "today", "yesterday", "tomorrow", and anything dateutil can read
    ("2024-01-15", "Jan 15 2024", ...).

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative:
        return relative[text]

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Current periods end today; past periods cover the whole month, year or
    Monday-to-Sunday week.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)
    week_start = today - timedelta(days=today.weekday())

    if period == "this-month":
        return month_start, today
    if period == "this-year":
        return year_start, today
    if period == "this-week":
        return week_start, today
    if period == "last-month":
        return month_start - relativedelta(months=1), month_start - timedelta(days=1)
    if period == "last-year":
        return year_start - relativedelta(years=1), year_start - timedelta(days=1)
    if period == "last-week":
        start = week_start - timedelta(days=7)
        return start, start + timedelta(days=6)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
