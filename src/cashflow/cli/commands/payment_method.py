"""Payment method management commands."""

import click

from cashflow.cli.error_handling import echo_json, handle_domain_error
from cashflow.cli.resolution import resolve_payment_method_or_exit
from cashflow.domain.entities import PaymentMethodInput
from cashflow.domain.errors import DomainError
from cashflow.domain.payment_method import PaymentMethodService
from cashflow.domain.presentation import to_plain_dict


@click.group()
def payment_method_group():
    """Manage payment methods."""
    pass


@payment_method_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Hide deactivated payment methods")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def list_payment_methods(ctx, active_only: bool, as_json: bool):
    """List payment methods."""
    service = PaymentMethodService(ctx.obj["db"])

    try:
        methods = service.list_active_payment_methods() if active_only else service.list_payment_methods()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json([to_plain_dict(method) for method in methods])
        return
    if not methods:
        click.echo("No payment methods found.")
        return

    click.echo("\nPayment methods:")
    click.echo("-" * 80)
    for method in methods:
        status = "" if method.is_active else "  (inactive)"
        click.echo(f"{method.name:20s} | {method.description or '':32s} | {method.id}{status}")


@payment_method_group.command("create")
@click.argument("name")
@click.option("--description", help="Description")
@click.pass_context
def create_payment_method(ctx, name: str, description: str | None):
    """Create a new payment method.

    Examples:
        cashflow payment-method create "Venmo" --description "Venmo transfers"
    """
    service = PaymentMethodService(ctx.obj["db"])

    try:
        method = service.create_payment_method(PaymentMethodInput(name=name, description=description))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created payment method '{method.name}' (ID: {method.id})")


@payment_method_group.command("update")
@click.argument("payment_method")
@click.option("--name", help="New name")
@click.option("--description", help="Description, or empty string to clear")
@click.option("--active/--inactive", default=None, help="Activate or deactivate")
@click.pass_context
def update_payment_method(
    ctx, payment_method: str, name: str | None, description: str | None, active: bool | None
):
    """Update a payment method.

    PAYMENT_METHOD can be a name or ID. Only the options given change.
    """
    service = PaymentMethodService(ctx.obj["db"])
    method_id = resolve_payment_method_or_exit(ctx, service, payment_method)
    current = service.get_payment_method(method_id)

    params = PaymentMethodInput(
        name=name if name is not None else current.name,
        description=description if description is not None else current.description,
        is_active=active if active is not None else current.is_active,
    )

    try:
        updated = service.update_payment_method(method_id, params)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated payment method '{updated.name}'")


@payment_method_group.command("delete")
@click.argument("payment_method")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_payment_method(ctx, payment_method: str, yes: bool):
    """Delete a payment method.

    Payment methods still used by transactions cannot be deleted; deactivate
    them instead.
    """
    service = PaymentMethodService(ctx.obj["db"])
    method_id = resolve_payment_method_or_exit(ctx, service, payment_method)
    method = service.get_payment_method(method_id)

    if not yes and not click.confirm(f"Are you sure you want to delete payment method '{method.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_payment_method(method_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted payment method '{method.name}'")


@payment_method_group.command("deactivate")
@click.argument("payment_method")
@click.pass_context
def deactivate_payment_method(ctx, payment_method: str):
    """Hide a payment method from new transactions without deleting it."""
    service = PaymentMethodService(ctx.obj["db"])
    method_id = resolve_payment_method_or_exit(ctx, service, payment_method)

    try:
        service.deactivate_payment_method(method_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated payment method {payment_method}")


@payment_method_group.command("deps")
@click.argument("payment_method")
@click.pass_context
def payment_method_dependencies(ctx, payment_method: str):
    """Show how many transactions use a payment method."""
    service = PaymentMethodService(ctx.obj["db"])
    method_id = resolve_payment_method_or_exit(ctx, service, payment_method)

    try:
        count = service.check_dependencies(method_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{payment_method}: used in {count} transaction{'s' if count != 1 else ''}")


def register_commands(cli):
    """Register payment method commands with main CLI."""
    cli.add_command(payment_method_group, name="payment-method")
