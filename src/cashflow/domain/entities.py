"""Domain model entities for cashflow.

These are pure data classes representing business concepts, independent of
database schema. Nullable storage columns are modelled as Optional fields so
that an absent value stays distinguishable from an empty one.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

DEFAULT_USER_ID = "default"
DEFAULT_CURRENCY = "USD"
DEFAULT_EXCHANGE_RATE = Decimal("1.0")


class TransactionType(str, Enum):
    """Kinds of financial event."""

    INCOME = "income"
    EXPENSE = "expense"
    SALE = "sale"
    PURCHASE = "purchase"


# Types counted on each side of the profit calculation
INCOME_TYPES = (TransactionType.INCOME.value, TransactionType.SALE.value)
EXPENSE_TYPES = (TransactionType.EXPENSE.value, TransactionType.PURCHASE.value)


class PaymentStatus(str, Enum):
    """Settlement state of a transaction."""

    PENDING = "pending"
    COMPLETED = "completed"
    PARTIAL = "partial"
    CANCELLED = "cancelled"


class RecurringFrequency(str, Enum):
    """Repeat interval for recurring transactions."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class CategoryType(str, Enum):
    """Which transaction sides a category applies to."""

    INCOME = "income"
    EXPENSE = "expense"
    BOTH = "both"


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: str
    name: str
    type: str
    color: Optional[str]
    icon: Optional[str]
    parent_id: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PaymentMethod:
    """Payment method domain entity."""

    id: str
    name: str
    description: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``tags`` and ``attachments`` hold the raw serialized column text; the
    presentation adapter decodes them.
    """

    id: str
    type: str
    description: str
    amount: Decimal
    transaction_date: date
    category_id: Optional[str]
    tags: Optional[str]
    customer_vendor: Optional[str]
    payment_method_id: Optional[str]
    payment_status: Optional[str]
    reference_number: Optional[str]
    invoice_number: Optional[str]
    notes: Optional[str]
    attachments: Optional[str]
    tax_amount: Optional[Decimal]
    discount_amount: Optional[Decimal]
    due_amount: Optional[Decimal]
    net_amount: Optional[Decimal]
    currency: Optional[str]
    exchange_rate: Optional[Decimal]
    is_recurring: Optional[bool]
    recurring_frequency: Optional[str]
    recurring_end_date: Optional[date]
    parent_transaction_id: Optional[str]
    created_by: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


@dataclass(frozen=True)
class TransactionStats:
    """Aggregate figures over a set of live transactions."""

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    total_transactions: int = 0
    total_income_count: int = 0
    total_expense_count: int = 0
    average_transaction: Decimal = Decimal("0")
    pending_income: Decimal = Decimal("0")
    pending_expenses: Decimal = Decimal("0")


@dataclass(frozen=True)
class CategorySummary:
    """Count and total for one (category, type) group."""

    category_id: Optional[str]
    category_name: str
    type: str
    count: int
    total_amount: Decimal


@dataclass(frozen=True)
class SuggestionItem:
    """Autocomplete candidate with its historical occurrence count."""

    value: str
    frequency: int


@dataclass
class TransactionInput:
    """Caller-supplied fields for creating or fully replacing a transaction.

    ``transaction_date`` and ``recurring_end_date`` accept ``YYYY-MM-DD``
    strings or ``date`` objects; money accepts anything ``Decimal`` can read.
    """

    type: str
    description: str
    amount: Decimal | float | str
    transaction_date: str | date
    category_id: Optional[str] = None
    tags: Optional[list[str]] = None
    customer_vendor: Optional[str] = None
    payment_method_id: Optional[str] = None
    payment_status: Optional[str] = None
    reference_number: Optional[str] = None
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    attachments: Optional[list[str]] = None
    tax_amount: Decimal | float | str = Decimal("0")
    discount_amount: Decimal | float | str = Decimal("0")
    due_amount: Decimal | float | str = Decimal("0")
    currency: Optional[str] = None
    exchange_rate: Optional[Decimal | float | str] = None
    is_recurring: bool = False
    recurring_frequency: Optional[str] = None
    recurring_end_date: Optional[str | date] = None
    parent_transaction_id: Optional[str] = None
    created_by: Optional[str] = None


@dataclass
class TransactionFilter:
    """Filters for listing transactions; empty sequences mean no restriction."""

    created_by: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    types: list[str] = field(default_factory=list)
    category_ids: list[str] = field(default_factory=list)
    payment_statuses: list[str] = field(default_factory=list)
    payment_method_ids: list[str] = field(default_factory=list)
    customer_vendor_search: Optional[str] = None
    description_search: Optional[str] = None
    min_due_amount: Optional[Decimal] = None
    max_due_amount: Optional[Decimal] = None
    limit: int = 0
    offset: int = 0


@dataclass
class StatsParams:
    """User and optional inclusive date range for aggregate queries."""

    created_by: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None


@dataclass
class CategoryInput:
    """Caller-supplied fields for creating or fully replacing a category."""

    name: str
    type: str
    color: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None
    is_active: bool = True


@dataclass
class PaymentMethodInput:
    """Caller-supplied fields for creating or fully replacing a payment method."""

    name: str
    description: Optional[str] = None
    is_active: bool = True
