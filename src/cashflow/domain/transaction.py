"""Transaction domain service: CRUD, filtered listing, search and aggregates."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

from cashflow.domain.entities import (
    DEFAULT_CURRENCY,
    DEFAULT_EXCHANGE_RATE,
    DEFAULT_USER_ID,
    EXPENSE_TYPES,
    INCOME_TYPES,
    CategorySummary,
    PaymentStatus,
    StatsParams,
    SuggestionItem,
    Transaction as TransactionEntity,
    TransactionFilter,
    TransactionInput,
    TransactionStats,
)
from cashflow.domain.errors import NotFoundError, ValidationError, transaction_not_found
from cashflow.utils.amount_parser import quantize_cents, to_decimal
from cashflow.utils.date_parser import parse_iso_date, parse_optional_iso_date
from cashflow.utils.serialization import encode_string_list

if TYPE_CHECKING:
    from cashflow.database.base import Database

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50
DEFAULT_SEARCH_LIMIT = 50
DEFAULT_RECENT_LIMIT = 10
DEFAULT_SUGGESTION_LIMIT = 10
UNCATEGORIZED = "Uncategorized"

ZERO = Decimal("0")


def _user(created_by: Optional[str]) -> str:
    return created_by or DEFAULT_USER_ID


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value if value else None


class TransactionService:
    """Service for recording, querying and aggregating transactions."""

    def __init__(self, db: "Database"):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _column_values(self, params: TransactionInput) -> dict[str, Any]:
        """Normalize caller input into column values shared by create and update.

        Empty strings become NULL and the documented defaults are applied.
        Enumerations and the amount sign are left for the storage constraints.

        Raises:
            ValidationError: If a date or money field cannot be parsed
        """
        try:
            return self._parse_column_values(params)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    def _parse_column_values(self, params: TransactionInput) -> dict[str, Any]:
        exchange_rate = to_decimal(params.exchange_rate, "exchange_rate")
        return {
            "type": params.type,
            "description": params.description,
            "amount": to_decimal(params.amount, "amount"),
            "transaction_date": parse_iso_date(params.transaction_date, "transaction_date"),
            "category_id": _blank_to_none(params.category_id),
            "tags": encode_string_list(params.tags),
            "customer_vendor": _blank_to_none(params.customer_vendor),
            "payment_method_id": _blank_to_none(params.payment_method_id),
            "payment_status": params.payment_status or PaymentStatus.COMPLETED.value,
            "reference_number": _blank_to_none(params.reference_number),
            "invoice_number": _blank_to_none(params.invoice_number),
            "notes": _blank_to_none(params.notes),
            "attachments": encode_string_list(params.attachments),
            "tax_amount": to_decimal(params.tax_amount, "tax_amount"),
            "discount_amount": to_decimal(params.discount_amount, "discount_amount"),
            "due_amount": to_decimal(params.due_amount, "due_amount"),
            "currency": params.currency or DEFAULT_CURRENCY,
            "exchange_rate": exchange_rate if exchange_rate != ZERO else DEFAULT_EXCHANGE_RATE,
            "is_recurring": bool(params.is_recurring),
            "recurring_frequency": _blank_to_none(params.recurring_frequency),
            "recurring_end_date": parse_optional_iso_date(
                params.recurring_end_date, "recurring_end_date"
            ),
        }

    def create_transaction(self, params: TransactionInput) -> TransactionEntity:
        """Create a transaction.

        Args:
            params: Transaction fields; created_by defaults to the default user

        Returns:
            The stored transaction, including net_amount and timestamps

        Raises:
            ValidationError: If a value is unparsable or rejected by a storage
                constraint (unknown type or status, negative amount, ...)
        """
        values = self._column_values(params)
        values["parent_transaction_id"] = _blank_to_none(params.parent_transaction_id)
        values["created_by"] = _user(params.created_by)

        transaction = self.db.create_transaction(values)
        logger.info(f"Created transaction {transaction.id} ({transaction.type} {transaction.amount})")
        return transaction

    def get_transaction(self, transaction_id: str) -> TransactionEntity:
        """Get a live transaction by ID.

        Raises:
            NotFoundError: If no live transaction has this ID
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(self, filters: Optional[TransactionFilter] = None) -> list[TransactionEntity]:
        """List live transactions matching all supplied filters, newest first.

        A limit of 0 or less means the default page size of 50.
        """
        filters = filters or TransactionFilter()
        return self.db.list_transactions(
            created_by=_user(filters.created_by),
            start_date=filters.from_date,
            end_date=filters.to_date,
            types=filters.types,
            category_ids=filters.category_ids,
            payment_statuses=filters.payment_statuses,
            payment_method_ids=filters.payment_method_ids,
            customer_vendor_search=filters.customer_vendor_search,
            description_search=filters.description_search,
            min_due_amount=filters.min_due_amount,
            max_due_amount=filters.max_due_amount,
            limit=filters.limit if filters.limit > 0 else DEFAULT_LIST_LIMIT,
            offset=filters.offset,
        )

    def update_transaction(self, transaction_id: str, params: TransactionInput) -> TransactionEntity:
        """Replace every mutable field of a live transaction.

        created_by and parent_transaction_id are fixed at creation and are
        not changed. net_amount is recomputed by storage.

        Raises:
            NotFoundError: If no live transaction has this ID
            ValidationError: If a value is unparsable or rejected by storage
        """
        values = self._column_values(params)
        transaction = self.db.update_transaction(transaction_id, values)
        logger.info(f"Updated transaction {transaction_id}")
        return transaction

    def delete_transaction(self, transaction_id: str) -> None:
        """Soft delete a transaction.

        Raises:
            NotFoundError: If no live transaction has this ID
        """
        self.db.soft_delete_transaction(transaction_id)
        logger.info(f"Deleted transaction {transaction_id}")

    def search_transactions(
        self,
        term: str,
        limit: int = 0,
        offset: int = 0,
        created_by: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """Search description, customer/vendor, reference, invoice and notes.

        Matching is a case-insensitive substring test on any of the columns.
        A limit of 0 or less means 50.
        """
        return self.db.search_transactions(
            created_by=_user(created_by),
            term=term or "",
            limit=limit if limit > 0 else DEFAULT_SEARCH_LIMIT,
            offset=offset,
        )

    def get_recent_transactions(self, limit: int = 0, created_by: Optional[str] = None) -> list[TransactionEntity]:
        """Most recent live transactions. A limit of 0 means 10."""
        return self.db.list_transactions(
            created_by=_user(created_by),
            limit=limit if limit > 0 else DEFAULT_RECENT_LIMIT,
        )

    def _transactions_in_range(self, params: Optional[StatsParams]) -> list[TransactionEntity]:
        params = params or StatsParams()
        return self.db.list_transactions(
            created_by=_user(params.created_by),
            start_date=params.from_date,
            end_date=params.to_date,
        )

    def get_transaction_stats(self, params: Optional[StatsParams] = None) -> TransactionStats:
        """Compute totals over live transactions in the optional date range.

        Income covers income and sale rows, expenses cover expense and
        purchase rows. Sums use Decimal; an empty range gives all zeros.
        """
        transactions = self._transactions_in_range(params)
        if not transactions:
            return TransactionStats()

        total_income = total_expenses = pending_income = pending_expenses = ZERO
        income_count = expense_count = 0
        total_amount = ZERO

        for txn in transactions:
            amount = txn.amount or ZERO
            total_amount += amount
            is_pending = txn.payment_status == PaymentStatus.PENDING.value
            if txn.type in INCOME_TYPES:
                total_income += amount
                income_count += 1
                if is_pending:
                    pending_income += amount
            elif txn.type in EXPENSE_TYPES:
                total_expenses += amount
                expense_count += 1
                if is_pending:
                    pending_expenses += amount

        return TransactionStats(
            total_income=total_income,
            total_expenses=total_expenses,
            net_profit=total_income - total_expenses,
            total_transactions=len(transactions),
            total_income_count=income_count,
            total_expense_count=expense_count,
            average_transaction=quantize_cents(total_amount / len(transactions)),
            pending_income=pending_income,
            pending_expenses=pending_expenses,
        )

    def get_transactions_by_category(self, params: Optional[StatsParams] = None) -> list[CategorySummary]:
        """Group live transactions in range by (category, type).

        Transactions without a category fall into an "Uncategorized" group
        with category_id None. Groups are ordered by type, then by total
        amount descending.
        """
        transactions = self._transactions_in_range(params)

        groups: dict[tuple[Optional[str], str], dict[str, Any]] = defaultdict(
            lambda: {"count": 0, "total": ZERO}
        )
        for txn in transactions:
            group = groups[(txn.category_id, txn.type)]
            group["count"] += 1
            group["total"] += txn.amount or ZERO

        names = {cat.id: cat.name for cat in self.db.list_categories()} if groups else {}

        summaries = [
            CategorySummary(
                category_id=category_id,
                category_name=UNCATEGORIZED if category_id is None else names.get(category_id, category_id),
                type=txn_type,
                count=data["count"],
                total_amount=data["total"],
            )
            for (category_id, txn_type), data in groups.items()
        ]
        summaries.sort(key=lambda s: (s.type, -s.total_amount, s.category_name))
        return summaries

    def get_description_suggestions(
        self,
        transaction_type: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 0,
        created_by: Optional[str] = None,
    ) -> list[SuggestionItem]:
        """Previously used descriptions for a type, most frequent first."""
        return self.db.get_value_suggestions(
            created_by=_user(created_by),
            column="description",
            transaction_type=transaction_type,
            search=search,
            limit=limit if limit > 0 else DEFAULT_SUGGESTION_LIMIT,
        )

    def get_customer_vendor_suggestions(
        self,
        transaction_type: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 0,
        created_by: Optional[str] = None,
    ) -> list[SuggestionItem]:
        """Previously used customers/vendors for a type, most frequent first."""
        return self.db.get_value_suggestions(
            created_by=_user(created_by),
            column="customer_vendor",
            transaction_type=transaction_type,
            search=search,
            limit=limit if limit > 0 else DEFAULT_SUGGESTION_LIMIT,
        )
