"""Presentation adapter: stored rows to frontend-ready response records.

Responses keep absent values as None. ``to_plain_dict`` renders any entity
or response for the frontend boundary: dates as YYYY-MM-DD, timestamps as
ISO-8601, money as floats.
"""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional, Sequence

from cashflow.domain.entities import Transaction
from cashflow.domain.errors import StorageError
from cashflow.utils.serialization import decode_string_list

if TYPE_CHECKING:
    from cashflow.database.base import Database

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionResponse:
    """Flat transaction record with decoded lists and resolved names."""

    id: str
    type: str
    description: str
    amount: Decimal
    transaction_date: date
    category_id: Optional[str]
    category: Optional[str]
    tags: list[str]
    customer_vendor: Optional[str]
    payment_method_id: Optional[str]
    payment_method: Optional[str]
    payment_status: Optional[str]
    reference_number: Optional[str]
    invoice_number: Optional[str]
    notes: Optional[str]
    attachments: list[str]
    tax_amount: Optional[Decimal]
    discount_amount: Optional[Decimal]
    due_amount: Optional[Decimal]
    net_amount: Optional[Decimal]
    currency: Optional[str]
    exchange_rate: Optional[Decimal]
    is_recurring: bool
    recurring_frequency: Optional[str]
    recurring_end_date: Optional[date]
    parent_transaction_id: Optional[str]
    created_by: str
    created_at: datetime
    updated_at: datetime


class TransactionPresenter:
    """Builds TransactionResponse records, resolving names by point lookup."""

    def __init__(self, db: "Database"):
        self.db = db

    def _category_name(self, category_id: Optional[str]) -> Optional[str]:
        if not category_id:
            return None
        try:
            category = self.db.get_category(category_id)
        except StorageError as e:
            logger.debug(f"Could not resolve category {category_id}: {e}")
            return None
        return category.name if category is not None else None

    def _payment_method_name(self, payment_method_id: Optional[str]) -> Optional[str]:
        if not payment_method_id:
            return None
        try:
            method = self.db.get_payment_method(payment_method_id)
        except StorageError as e:
            logger.debug(f"Could not resolve payment method {payment_method_id}: {e}")
            return None
        return method.name if method is not None else None

    def to_response(self, txn: Transaction) -> TransactionResponse:
        return TransactionResponse(
            id=txn.id,
            type=txn.type,
            description=txn.description,
            amount=txn.amount,
            transaction_date=txn.transaction_date,
            category_id=txn.category_id,
            category=self._category_name(txn.category_id),
            tags=decode_string_list(txn.tags),
            customer_vendor=txn.customer_vendor,
            payment_method_id=txn.payment_method_id,
            payment_method=self._payment_method_name(txn.payment_method_id),
            payment_status=txn.payment_status,
            reference_number=txn.reference_number,
            invoice_number=txn.invoice_number,
            notes=txn.notes,
            attachments=decode_string_list(txn.attachments),
            tax_amount=txn.tax_amount,
            discount_amount=txn.discount_amount,
            due_amount=txn.due_amount,
            net_amount=txn.net_amount,
            currency=txn.currency,
            exchange_rate=txn.exchange_rate,
            is_recurring=bool(txn.is_recurring),
            recurring_frequency=txn.recurring_frequency,
            recurring_end_date=txn.recurring_end_date,
            parent_transaction_id=txn.parent_transaction_id,
            created_by=txn.created_by,
            created_at=txn.created_at,
            updated_at=txn.updated_at,
        )

    def to_responses(self, transactions: Sequence[Transaction]) -> list[TransactionResponse]:
        return [self.to_response(txn) for txn in transactions]


def _plain_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list):
        return [_plain_value(v) for v in value]
    return value


def to_plain_dict(record: Any) -> dict[str, Any]:
    """Render a dataclass entity or response as a JSON-compatible dict."""
    return {key: _plain_value(value) for key, value in dataclasses.asdict(record).items()}
