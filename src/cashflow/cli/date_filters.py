"""Date range options shared by `transaction list` and `stats`."""

from datetime import date
from typing import Optional

import click

from cashflow.utils.date_parser import PERIODS, get_date_range, parse_date

PERIOD_HELP = {
    "this-month": "Use this month so far",
    "this-year": "Use this year so far",
    "this-week": "Use this week so far",
    "last-month": "Use last month",
    "last-year": "Use last year",
    "last-week": "Use last week (Monday to Sunday)",
}


def period_options(func):
    """Add one --<period> flag per named period, in PERIODS order."""
    for period in reversed(PERIODS):
        func = click.option(f"--{period}", is_flag=True, help=PERIOD_HELP[period])(func)
    return func


def selected_periods(period_kwargs: dict) -> list[str]:
    """Names of the period flags set on the command line."""
    return [period for period in PERIODS if period_kwargs.get(period.replace("-", "_"))]


def _fail(ctx, message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def _parse_bound(ctx, value: Optional[str], option: str) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        _fail(ctx, f"Invalid {option}: {e}")


def resolve_cli_date_range(
    ctx,
    start_date: Optional[str],
    end_date: Optional[str],
    period_kwargs: dict,
) -> tuple[Optional[date], Optional[date]]:
    """Turn --start-date/--end-date or a single period flag into a date range.

    Either bound may be None, meaning the range is open on that side.
    Exits with status 1 on conflicting options or an unparsable date.
    """
    periods = selected_periods(period_kwargs)
    if len(periods) > 1:
        _fail(ctx, "Only one period option can be used at a time: " + ", ".join(f"--{p}" for p in periods))
    if periods:
        if start_date or end_date:
            _fail(ctx, f"--{periods[0]} cannot be combined with --start-date or --end-date")
        return get_date_range(periods[0])

    return _parse_bound(ctx, start_date, "--start-date"), _parse_bound(ctx, end_date, "--end-date")
