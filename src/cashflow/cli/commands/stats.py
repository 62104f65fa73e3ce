"""Statistics commands."""

import click

from cashflow.cli.date_filters import period_options, resolve_cli_date_range
from cashflow.cli.error_handling import echo_json, handle_domain_error
from cashflow.domain.entities import StatsParams
from cashflow.domain.errors import DomainError
from cashflow.domain.presentation import to_plain_dict
from cashflow.domain.transaction import TransactionService
from cashflow.utils.date_parser import format_iso_date


def _range_label(start, end) -> str:
    if start is None and end is None:
        return "All time"
    return f"{format_iso_date(start) or '...'} to {format_iso_date(end) or '...'}"


@click.command("stats")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@period_options
@click.option("--by-category", is_flag=True, help="Break totals down by category and type")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def show_stats(ctx, start_date: str | None, end_date: str | None, by_category: bool, as_json: bool, **period_kwargs):
    """Show income, expense and profit totals.

    Examples:
        cashflow stats --this-month
        cashflow stats --start-date 2024-01-01 --end-date 2024-03-31 --by-category
    """
    service = TransactionService(ctx.obj["db"])

    start, end = resolve_cli_date_range(ctx, start_date, end_date, period_kwargs)
    params = StatsParams(from_date=start, to_date=end)

    try:
        if by_category:
            summaries = service.get_transactions_by_category(params)
        else:
            stats = service.get_transaction_stats(params)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if by_category:
        if as_json:
            echo_json([to_plain_dict(summary) for summary in summaries])
            return
        click.echo(f"\nBy category: {_range_label(start, end)}")
        click.echo("-" * 64)
        if not summaries:
            click.echo("No transactions found.")
            return
        for summary in summaries:
            click.echo(
                f"{summary.type:<8}  {summary.category_name:<28}  "
                f"{summary.count:>5}  {summary.total_amount:>14,.2f}"
            )
        return

    if as_json:
        echo_json(to_plain_dict(stats))
        return

    click.echo(f"\nSummary: {_range_label(start, end)}")
    click.echo("-" * 44)
    rows = [
        ("Income", stats.total_income, stats.total_income_count),
        ("Expenses", stats.total_expenses, stats.total_expense_count),
    ]
    for label, total, count in rows:
        click.echo(f"{label:<20}{total:>14,.2f}  ({count})")
    click.echo(f"{'Net profit':<20}{stats.net_profit:>14,.2f}")
    click.echo(f"{'Average':<20}{stats.average_transaction:>14,.2f}")
    click.echo(f"{'Pending income':<20}{stats.pending_income:>14,.2f}")
    click.echo(f"{'Pending expenses':<20}{stats.pending_expenses:>14,.2f}")
    click.echo(f"{'Transactions':<20}{stats.total_transactions:>14d}")


def register_commands(cli):
    """Register statistics commands with main CLI."""
    cli.add_command(show_stats)
