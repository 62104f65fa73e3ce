"""Transaction management commands."""

from datetime import date
from decimal import Decimal

import click

from cashflow.cli.date_filters import period_options, resolve_cli_date_range
from cashflow.cli.error_handling import echo_json, handle_domain_error
from cashflow.cli.resolution import resolve_category_or_exit, resolve_payment_method_or_exit
from cashflow.domain.category import CategoryService
from cashflow.domain.entities import (
    PaymentStatus,
    RecurringFrequency,
    Transaction,
    TransactionFilter,
    TransactionInput,
    TransactionType,
)
from cashflow.domain.errors import DomainError
from cashflow.domain.payment_method import PaymentMethodService
from cashflow.domain.presentation import TransactionPresenter, TransactionResponse, to_plain_dict
from cashflow.domain.transaction import TransactionService
from cashflow.utils.amount_parser import parse_amount
from cashflow.utils.date_parser import parse_date
from cashflow.utils.serialization import decode_string_list

TYPE_CHOICES = click.Choice([t.value for t in TransactionType])
STATUS_CHOICES = click.Choice([s.value for s in PaymentStatus])
FREQUENCY_CHOICES = click.Choice([f.value for f in RecurringFrequency])


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


def _parse_date_or_exit(ctx: click.Context, value: str, label: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _parse_amount_or_exit(ctx: click.Context, value: str, label: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _echo_table(responses: list[TransactionResponse]) -> None:
    click.echo(f"\n{'Date':<10}  {'Type':<8}  {'Amount':>12}  {'Status':<9}  {'Description':<30}  ID")
    click.echo("-" * 110)
    for resp in responses:
        click.echo(
            f"{resp.transaction_date.isoformat():<10}  {resp.type:<8}  {resp.amount:>12,.2f}  "
            f"{resp.payment_status or '':<9}  {resp.description[:30]:<30}  {resp.id}"
        )


def _echo_responses(responses: list[TransactionResponse], as_json: bool) -> None:
    if as_json:
        echo_json([to_plain_dict(resp) for resp in responses])
        return
    if not responses:
        click.echo("No transactions found.")
        return
    _echo_table(responses)


def _echo_detail(resp: TransactionResponse) -> None:
    for key, value in to_plain_dict(resp).items():
        if isinstance(value, list):
            value = ", ".join(value)
        click.echo(f"{key:>22}: {'' if value is None else value}")


def _input_from(txn: Transaction) -> TransactionInput:
    """Current values of a transaction as update input."""
    return TransactionInput(
        type=txn.type,
        description=txn.description,
        amount=txn.amount,
        transaction_date=txn.transaction_date,
        category_id=txn.category_id,
        tags=decode_string_list(txn.tags),
        customer_vendor=txn.customer_vendor,
        payment_method_id=txn.payment_method_id,
        payment_status=txn.payment_status,
        reference_number=txn.reference_number,
        invoice_number=txn.invoice_number,
        notes=txn.notes,
        attachments=decode_string_list(txn.attachments),
        tax_amount=txn.tax_amount,
        discount_amount=txn.discount_amount,
        due_amount=txn.due_amount,
        currency=txn.currency,
        exchange_rate=txn.exchange_rate,
        is_recurring=bool(txn.is_recurring),
        recurring_frequency=txn.recurring_frequency,
        recurring_end_date=txn.recurring_end_date,
        parent_transaction_id=txn.parent_transaction_id,
        created_by=txn.created_by,
    )


@transaction_group.command("add")
@click.option("--type", "txn_type", type=TYPE_CHOICES, required=True, help="Transaction type")
@click.option("--description", required=True, help="What the transaction was for")
@click.option("--amount", required=True, help="Gross amount (e.g., 123.45 or $1,234.56)")
@click.option("--date", "txn_date", default="today", show_default=True, help="Transaction date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--category", help="Category name or ID")
@click.option("--payment-method", help="Payment method name or ID")
@click.option("--status", type=STATUS_CHOICES, help="Payment status (default: completed)")
@click.option("--customer", help="Customer or vendor name")
@click.option("--reference", help="Reference number")
@click.option("--invoice", help="Invoice number")
@click.option("--notes", help="Notes")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--attachment", "attachments", multiple=True, help="Attachment path (repeatable)")
@click.option("--tax", help="Tax amount")
@click.option("--discount", help="Discount amount")
@click.option("--due", help="Amount still due")
@click.option("--currency", help="Currency code (default: USD)")
@click.option("--exchange-rate", help="Exchange rate (default: 1.0)")
@click.option("--recurring", type=FREQUENCY_CHOICES, help="Mark as recurring with this frequency")
@click.option("--recurring-end", help="Date the recurrence ends")
@click.option("--parent", help="ID of the transaction this one derives from")
@click.option("--json", "as_json", is_flag=True, help="Print the created transaction as JSON")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    description: str,
    amount: str,
    txn_date: str,
    category: str | None,
    payment_method: str | None,
    status: str | None,
    customer: str | None,
    reference: str | None,
    invoice: str | None,
    notes: str | None,
    tags: tuple[str, ...],
    attachments: tuple[str, ...],
    tax: str | None,
    discount: str | None,
    due: str | None,
    currency: str | None,
    exchange_rate: str | None,
    recurring: str | None,
    recurring_end: str | None,
    parent: str | None,
    as_json: bool,
):
    """Record a transaction.

    Examples:
        cashflow transaction add --type expense --amount 42.50 --description "Printer paper"
        cashflow transaction add --type sale --amount 1200 --description "Website" \\
            --customer "Acme" --category "Services" --status pending --due 1200
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    params = TransactionInput(
        type=txn_type,
        description=description,
        amount=_parse_amount_or_exit(ctx, amount, "amount"),
        transaction_date=_parse_date_or_exit(ctx, txn_date, "date"),
        category_id=resolve_category_or_exit(ctx, CategoryService(db), category) if category else None,
        tags=list(tags),
        customer_vendor=customer,
        payment_method_id=(
            resolve_payment_method_or_exit(ctx, PaymentMethodService(db), payment_method)
            if payment_method
            else None
        ),
        payment_status=status,
        reference_number=reference,
        invoice_number=invoice,
        notes=notes,
        attachments=list(attachments),
        tax_amount=_parse_amount_or_exit(ctx, tax, "tax amount") if tax else Decimal("0"),
        discount_amount=_parse_amount_or_exit(ctx, discount, "discount amount") if discount else Decimal("0"),
        due_amount=_parse_amount_or_exit(ctx, due, "due amount") if due else Decimal("0"),
        currency=currency,
        exchange_rate=_parse_amount_or_exit(ctx, exchange_rate, "exchange rate") if exchange_rate else None,
        is_recurring=recurring is not None,
        recurring_frequency=recurring,
        recurring_end_date=_parse_date_or_exit(ctx, recurring_end, "recurring end date") if recurring_end else None,
        parent_transaction_id=parent,
    )

    try:
        txn = service.create_transaction(params)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(to_plain_dict(TransactionPresenter(db).to_response(txn)))
        return
    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  {txn.transaction_date}  {txn.type}  {txn.amount:,.2f}  (net {txn.net_amount:,.2f})")


@transaction_group.command("get")
@click.argument("transaction_id")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def get_transaction(ctx, transaction_id: str, as_json: bool):
    """Show every field of a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        txn = service.get_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    resp = TransactionPresenter(db).to_response(txn)
    if as_json:
        echo_json(to_plain_dict(resp))
    else:
        _echo_detail(resp)


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@period_options
@click.option("--type", "types", type=TYPE_CHOICES, multiple=True, help="Only this type (repeatable)")
@click.option("--category", "categories", multiple=True, help="Category name or ID (repeatable)")
@click.option("--status", "statuses", type=STATUS_CHOICES, multiple=True, help="Payment status (repeatable)")
@click.option("--payment-method", "payment_methods", multiple=True, help="Payment method name or ID (repeatable)")
@click.option("--customer", help="Customer/vendor contains this text")
@click.option("--search", help="Description contains this text")
@click.option("--min-due", help="Minimum amount due")
@click.option("--max-due", help="Maximum amount due")
@click.option("--limit", type=int, default=0, help="Maximum rows (default: 50)")
@click.option("--offset", type=int, default=0, help="Rows to skip")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    types: tuple[str, ...],
    categories: tuple[str, ...],
    statuses: tuple[str, ...],
    payment_methods: tuple[str, ...],
    customer: str | None,
    search: str | None,
    min_due: str | None,
    max_due: str | None,
    limit: int,
    offset: int,
    as_json: bool,
    **period_kwargs,
):
    """List transactions, newest first.

    Examples:
        cashflow transaction list --this-month --type expense
        cashflow transaction list --status pending --min-due 0.01
        cashflow transaction list --category "Rent" --category "Utilities"
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)
    payment_method_service = PaymentMethodService(db)

    start, end = resolve_cli_date_range(ctx, start_date, end_date, period_kwargs)

    filters = TransactionFilter(
        from_date=start,
        to_date=end,
        types=list(types),
        category_ids=[resolve_category_or_exit(ctx, category_service, c) for c in categories],
        payment_statuses=list(statuses),
        payment_method_ids=[
            resolve_payment_method_or_exit(ctx, payment_method_service, p) for p in payment_methods
        ],
        customer_vendor_search=customer,
        description_search=search,
        min_due_amount=_parse_amount_or_exit(ctx, min_due, "minimum due") if min_due else None,
        max_due_amount=_parse_amount_or_exit(ctx, max_due, "maximum due") if max_due else None,
        limit=limit,
        offset=offset,
    )

    try:
        transactions = service.list_transactions(filters)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_responses(TransactionPresenter(db).to_responses(transactions), as_json)


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--type", "txn_type", type=TYPE_CHOICES, help="Transaction type")
@click.option("--description", help="Description")
@click.option("--amount", help="Gross amount")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--category", help="Category name or ID, or empty string to clear")
@click.option("--payment-method", help="Payment method name or ID, or empty string to clear")
@click.option("--status", type=STATUS_CHOICES, help="Payment status")
@click.option("--customer", help="Customer or vendor name")
@click.option("--reference", help="Reference number")
@click.option("--invoice", help="Invoice number")
@click.option("--notes", help="Notes")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable)")
@click.option("--clear-tags", is_flag=True, help="Remove all tags")
@click.option("--attachment", "attachments", multiple=True, help="Replace attachments (repeatable)")
@click.option("--tax", help="Tax amount")
@click.option("--discount", help="Discount amount")
@click.option("--due", help="Amount still due")
@click.option("--currency", help="Currency code")
@click.option("--exchange-rate", help="Exchange rate")
@click.option("--recurring", type=FREQUENCY_CHOICES, help="Make recurring with this frequency")
@click.option("--not-recurring", is_flag=True, help="Stop treating the transaction as recurring")
@click.option("--recurring-end", help="Date the recurrence ends")
@click.option("--json", "as_json", is_flag=True, help="Print the updated transaction as JSON")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    txn_type: str | None,
    description: str | None,
    amount: str | None,
    txn_date: str | None,
    category: str | None,
    payment_method: str | None,
    status: str | None,
    customer: str | None,
    reference: str | None,
    invoice: str | None,
    notes: str | None,
    tags: tuple[str, ...],
    clear_tags: bool,
    attachments: tuple[str, ...],
    tax: str | None,
    discount: str | None,
    due: str | None,
    currency: str | None,
    exchange_rate: str | None,
    recurring: str | None,
    not_recurring: bool,
    recurring_end: str | None,
    as_json: bool,
):
    """Update a transaction.

    Updates only the fields that are provided. Use --category "" to clear the category.

    Examples:
        cashflow transaction update <ID> --status completed --due 0
        cashflow transaction update <ID> --category ""  # Clear category
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    if recurring and not_recurring:
        click.echo("Error: --recurring and --not-recurring cannot be combined.", err=True)
        ctx.exit(1)

    try:
        params = _input_from(service.get_transaction(transaction_id))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if txn_type is not None:
        params.type = txn_type
    if description is not None:
        params.description = description
    if amount is not None:
        params.amount = _parse_amount_or_exit(ctx, amount, "amount")
    if txn_date is not None:
        params.transaction_date = _parse_date_or_exit(ctx, txn_date, "date")
    if category is not None:
        params.category_id = (
            resolve_category_or_exit(ctx, CategoryService(db), category) if category else None
        )
    if payment_method is not None:
        params.payment_method_id = (
            resolve_payment_method_or_exit(ctx, PaymentMethodService(db), payment_method)
            if payment_method
            else None
        )
    if status is not None:
        params.payment_status = status
    if customer is not None:
        params.customer_vendor = customer
    if reference is not None:
        params.reference_number = reference
    if invoice is not None:
        params.invoice_number = invoice
    if notes is not None:
        params.notes = notes
    if clear_tags:
        params.tags = []
    elif tags:
        params.tags = list(tags)
    if attachments:
        params.attachments = list(attachments)
    if tax is not None:
        params.tax_amount = _parse_amount_or_exit(ctx, tax, "tax amount")
    if discount is not None:
        params.discount_amount = _parse_amount_or_exit(ctx, discount, "discount amount")
    if due is not None:
        params.due_amount = _parse_amount_or_exit(ctx, due, "due amount")
    if currency is not None:
        params.currency = currency
    if exchange_rate is not None:
        params.exchange_rate = _parse_amount_or_exit(ctx, exchange_rate, "exchange rate")
    if recurring is not None:
        params.is_recurring = True
        params.recurring_frequency = recurring
    if not_recurring:
        params.is_recurring = False
        params.recurring_frequency = None
        params.recurring_end_date = None
    if recurring_end is not None:
        params.recurring_end_date = (
            _parse_date_or_exit(ctx, recurring_end, "recurring end date") if recurring_end else None
        )

    try:
        txn = service.update_transaction(transaction_id, params)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json(to_plain_dict(TransactionPresenter(db).to_response(txn)))
        return
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool):
    """Delete a transaction.

    The row is kept in the database but no longer shows up anywhere.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        txn = service.get_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete '{txn.description}' ({txn.amount:,.2f} on {txn.transaction_date})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("search")
@click.argument("term")
@click.option("--limit", type=int, default=0, help="Maximum rows (default: 50)")
@click.option("--offset", type=int, default=0, help="Rows to skip")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def search_transactions(ctx, term: str, limit: int, offset: int, as_json: bool):
    """Find transactions whose description, customer/vendor, reference,
    invoice number or notes contain TERM (case-insensitive)."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        transactions = service.search_transactions(term, limit=limit, offset=offset)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_responses(TransactionPresenter(db).to_responses(transactions), as_json)


@transaction_group.command("recent")
@click.option("--limit", type=int, default=0, help="Number of transactions (default: 10)")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def recent_transactions(ctx, limit: int, as_json: bool):
    """Show the most recent transactions."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        transactions = service.get_recent_transactions(limit=limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_responses(TransactionPresenter(db).to_responses(transactions), as_json)


@transaction_group.command("suggest")
@click.argument("field", type=click.Choice(["description", "customer"]))
@click.option("--type", "txn_type", type=TYPE_CHOICES, help="Only values used with this type")
@click.option("--search", help="Only values containing this text")
@click.option("--limit", type=int, default=0, help="Number of suggestions (default: 10)")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def suggest_values(ctx, field: str, txn_type: str | None, search: str | None, limit: int, as_json: bool):
    """Suggest previously used descriptions or customers/vendors.

    Examples:
        cashflow transaction suggest description --type expense --search off
        cashflow transaction suggest customer --type sale
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        if field == "description":
            suggestions = service.get_description_suggestions(txn_type, search, limit)
        else:
            suggestions = service.get_customer_vendor_suggestions(txn_type, search, limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        echo_json([to_plain_dict(item) for item in suggestions])
        return
    if not suggestions:
        click.echo("No suggestions.")
        return
    for item in suggestions:
        click.echo(f"{item.frequency:4d}  {item.value}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
