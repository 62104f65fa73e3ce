"""Tests for date parsing utilities."""

import pytest
from datetime import date, datetime, timedelta
from dateutil.relativedelta import relativedelta
from cashflow.utils.date_parser import (
    format_iso_date,
    get_date_range,
    parse_date,
    parse_iso_date,
    parse_optional_iso_date,
)


def test_parse_iso_date():
    assert parse_iso_date("2024-01-15") == date(2024, 1, 15)
    assert parse_iso_date(" 2024-01-15 ") == date(2024, 1, 15)


def test_parse_iso_date_passes_dates_through():
    assert parse_iso_date(date(2024, 3, 1)) == date(2024, 3, 1)
    assert parse_iso_date(datetime(2024, 3, 1, 14, 30)) == date(2024, 3, 1)


@pytest.mark.parametrize("value", ["", "  ", "2024/01/15", "Jan 15 2024", "2024-02-30", "2024-1"])
def test_parse_iso_date_rejects_other_formats(value):
    with pytest.raises(ValueError, match="transaction_date"):
        parse_iso_date(value, "transaction_date")


def test_parse_optional_iso_date():
    assert parse_optional_iso_date(None) is None
    assert parse_optional_iso_date("") is None
    assert parse_optional_iso_date("2024-12-31") == date(2024, 12, 31)
    with pytest.raises(ValueError):
        parse_optional_iso_date("31-12-2024")


def test_format_iso_date():
    assert format_iso_date(date(2024, 1, 5)) == "2024-01-05"
    assert format_iso_date(None) is None


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-01-15")
    assert result == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()
    assert parse_date(" Today ") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    result = parse_date("yesterday")
    assert result == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow'."""
    result = parse_date("tomorrow")
    assert result == date.today() + timedelta(days=1)


def test_parse_standard_formats():
    """Test parsing various standard date formats."""
    # These should all work via dateutil parser
    assert parse_date("January 15, 2024") == date(2024, 1, 15)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("someday")


def test_get_date_range_this_month():
    """Test get_date_range for this-month."""
    today = date.today()
    start, end = get_date_range("this-month")
    assert start == date(today.year, today.month, 1)
    assert end == today


def test_get_date_range_this_year():
    """Test get_date_range for this-year."""
    today = date.today()
    start, end = get_date_range("this-year")
    assert start == date(today.year, 1, 1)
    assert end == today


def test_get_date_range_this_week():
    """Test get_date_range for this-week."""
    today = date.today()
    start, end = get_date_range("this-week")
    assert start == today - timedelta(days=today.weekday())
    assert start.weekday() == 0  # Monday
    assert end == today


def test_get_date_range_last_month():
    """Test get_date_range for last-month."""
    today = date.today()
    start, end = get_date_range("last-month")
    expected_start = (today - relativedelta(months=1)).replace(day=1)
    assert start == expected_start
    assert end == today.replace(day=1) - timedelta(days=1)
    assert end.month == expected_start.month


def test_get_date_range_last_year():
    """Test get_date_range for last-year."""
    today = date.today()
    start, end = get_date_range("last-year")
    assert start == date(today.year - 1, 1, 1)
    assert end == date(today.year - 1, 12, 31)


def test_get_date_range_last_week():
    """Test get_date_range for last-week."""
    start, end = get_date_range("last-week")
    assert start.weekday() == 0  # Monday
    assert end.weekday() == 6  # Sunday
    assert (end - start).days == 6
    assert end == date.today() - timedelta(days=date.today().weekday() + 1)


def test_get_date_range_invalid_period():
    """Test get_date_range with invalid period."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
