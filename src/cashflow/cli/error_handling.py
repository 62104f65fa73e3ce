"""CLI error handling and output helpers."""

import json
from typing import Any

import click

from cashflow.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def echo_json(data: Any) -> None:
    """Print JSON-compatible data (see ``to_plain_dict``) indented."""
    click.echo(json.dumps(data, indent=2))
