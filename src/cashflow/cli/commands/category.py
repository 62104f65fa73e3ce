"""Category management commands."""

import click

from cashflow.cli.error_handling import echo_json, handle_domain_error
from cashflow.cli.resolution import resolve_category_or_exit
from cashflow.domain.category import CategoryService
from cashflow.domain.entities import CategoryInput, CategoryType
from cashflow.domain.errors import DomainError
from cashflow.domain.presentation import to_plain_dict

CATEGORY_TYPE_CHOICES = click.Choice([t.value for t in CategoryType])


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=CATEGORY_TYPE_CHOICES, help="Only categories usable for this type")
@click.option("--active", "active_only", is_flag=True, help="Hide deactivated categories")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def list_categories(ctx, category_type: str | None, active_only: bool, as_json: bool):
    """List categories.

    --type income (or expense) also lists categories of type "both".
    """
    service = CategoryService(ctx.obj["db"])

    try:
        if category_type:
            categories = service.list_categories_by_type(category_type)
        elif active_only:
            categories = service.list_active_categories()
        else:
            categories = service.list_categories()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if category_type and active_only:
        categories = [cat for cat in categories if cat.is_active]

    if as_json:
        echo_json([to_plain_dict(cat) for cat in categories])
        return
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 80)
    for cat in categories:
        status = "" if cat.is_active else "  (inactive)"
        click.echo(f"{cat.name:28s} | {cat.type:7s} | {cat.icon or '':16s} | {cat.id}{status}")


@category_group.command("create")
@click.argument("name")
@click.option("--type", "category_type", type=CATEGORY_TYPE_CHOICES, required=True, help="Category type")
@click.option("--color", help="Display color (e.g., #10B981)")
@click.option("--icon", help="Icon name")
@click.option("--parent", help="Parent category name or ID")
@click.pass_context
def create_category(ctx, name: str, category_type: str, color: str | None, icon: str | None, parent: str | None):
    """Create a new category.

    Examples:
        cashflow category create "Subscriptions" --type expense
        cashflow category create "Refunds" --type both --color "#6366F1"
    """
    service = CategoryService(ctx.obj["db"])
    parent_id = resolve_category_or_exit(ctx, service, parent) if parent else None

    try:
        category = service.create_category(
            CategoryInput(name=name, type=category_type, color=color, icon=icon, parent_id=parent_id)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{category.name}' (ID: {category.id})")


@category_group.command("update")
@click.argument("category")
@click.option("--name", help="New name")
@click.option("--type", "category_type", type=CATEGORY_TYPE_CHOICES, help="New type")
@click.option("--color", help="Display color, or empty string to clear")
@click.option("--icon", help="Icon name, or empty string to clear")
@click.option("--parent", help="Parent category name or ID, or empty string to clear")
@click.option("--active/--inactive", default=None, help="Activate or deactivate")
@click.pass_context
def update_category(
    ctx,
    category: str,
    name: str | None,
    category_type: str | None,
    color: str | None,
    icon: str | None,
    parent: str | None,
    active: bool | None,
):
    """Update a category.

    CATEGORY can be a category name or ID. Only the options given change.
    """
    service = CategoryService(ctx.obj["db"])
    category_id = resolve_category_or_exit(ctx, service, category)
    current = service.get_category(category_id)

    params = CategoryInput(
        name=name if name is not None else current.name,
        type=category_type if category_type is not None else current.type,
        color=color if color is not None else current.color,
        icon=icon if icon is not None else current.icon,
        parent_id=current.parent_id,
        is_active=active if active is not None else current.is_active,
    )
    if parent is not None:
        params.parent_id = resolve_category_or_exit(ctx, service, parent) if parent else None

    try:
        updated = service.update_category(category_id, params)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated category '{updated.name}'")


@category_group.command("delete")
@click.argument("category")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, category: str, yes: bool):
    """Delete a category.

    CATEGORY can be a category name or ID. Categories still used by
    transactions cannot be deleted; deactivate them instead.
    """
    service = CategoryService(ctx.obj["db"])
    category_id = resolve_category_or_exit(ctx, service, category)
    category_obj = service.get_category(category_id)

    if not yes and not click.confirm(f"Are you sure you want to delete category '{category_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_category(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{category_obj.name}'")


@category_group.command("deactivate")
@click.argument("category")
@click.pass_context
def deactivate_category(ctx, category: str):
    """Hide a category from new transactions without deleting it."""
    service = CategoryService(ctx.obj["db"])
    category_id = resolve_category_or_exit(ctx, service, category)

    try:
        service.deactivate_category(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated category {category}")


@category_group.command("deps")
@click.argument("category")
@click.pass_context
def category_dependencies(ctx, category: str):
    """Show how many transactions use a category."""
    service = CategoryService(ctx.obj["db"])
    category_id = resolve_category_or_exit(ctx, service, category)

    try:
        count = service.check_dependencies(category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{category}: used in {count} transaction{'s' if count != 1 else ''}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
