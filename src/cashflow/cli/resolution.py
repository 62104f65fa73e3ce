"""CLI helpers for resolving category and payment method references."""

from __future__ import annotations

import click

from cashflow.domain.category import CategoryService
from cashflow.domain.errors import NotFoundError
from cashflow.domain.payment_method import PaymentMethodService


def resolve_category_or_exit(ctx: click.Context, service: CategoryService, value: str) -> str:
    """Resolve a category ID or name, or exit with a CLI error."""
    try:
        return service.get_category(value).id
    except NotFoundError:
        pass
    try:
        return service.get_category_by_name(value).id
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_payment_method_or_exit(ctx: click.Context, service: PaymentMethodService, value: str) -> str:
    """Resolve a payment method ID or name, or exit with a CLI error."""
    try:
        return service.get_payment_method(value).id
    except NotFoundError:
        pass
    try:
        return service.get_payment_method_by_name(value).id
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
