"""Main CLI entry point."""

import logging

import click

from cashflow.database.factories import DB_PATH_ENV_VAR, create_sqlite_database
from cashflow.domain.errors import StorageUnavailableError
from cashflow.logging_config import LOG_LEVELS, configure_logging

# Import and register all commands at module level
from cashflow.cli.commands import category, payment_method, stats, transaction

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV_VAR} environment variable)",
    envvar=DB_PATH_ENV_VAR,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="CASHFLOW_LOG_LEVEL",
    help="Log verbosity on stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Cashflow - bookkeeping for small businesses.

    Record income, expenses, sales and purchases, organise them by category
    and payment method, and see where the money went.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        try:
            db.connect()
            db.initialize_schema()
        except StorageUnavailableError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        logger.debug(f"Using database {db.database_url}")
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
transaction.register_commands(cli)
category.register_commands(cli)
payment_method.register_commands(cli)
stats.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
