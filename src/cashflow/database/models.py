"""SQLAlchemy models for cashflow database."""

import uuid
from datetime import datetime, UTC
from typing import Iterable

from sqlalchemy import (
    Column,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Integer,
    CheckConstraint,
    Computed,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from cashflow.domain.entities import (
    DEFAULT_USER_ID,
    CategoryType,
    PaymentStatus,
    RecurringFrequency,
    TransactionType,
)

Base = declarative_base()

NET_AMOUNT_EXPRESSION = "amount - discount_amount + tax_amount"


def new_id() -> str:
    """Return a random 32-character hex key."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(UTC)


def _in_check(column: str, values: Iterable[str], name: str) -> CheckConstraint:
    allowed = ", ".join(f"'{v}'" for v in values)
    return CheckConstraint(f"{column} IN ({allowed})", name=name)


TRANSACTION_TYPES = [t.value for t in TransactionType]
PAYMENT_STATUSES = [s.value for s in PaymentStatus]
RECURRING_FREQUENCIES = [f.value for f in RecurringFrequency]
CATEGORY_TYPES = [c.value for c in CategoryType]


class User(Base):
    """Owner of transactions. Only the seeded default user exists today."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False, default="Default User")
    email = Column(String, nullable=True)
    preferences = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)


class Category(Base):
    """Category model. parent_id is stored but the hierarchy is not traversed."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False)
    color = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    parent_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (_in_check("type", CATEGORY_TYPES, "ck_categories_type"),)


class PaymentMethod(Base):
    """Payment method model."""

    __tablename__ = "payment_methods"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)


class Transaction(Base):
    """Transaction model.

    net_amount is generated by SQLite on every insert and update.
    """

    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=new_id)
    type = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, index=True)
    transaction_date = Column(Date, nullable=False, index=True)
    category_id = Column(
        String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    tags = Column(Text, nullable=True)
    customer_vendor = Column(String, nullable=True, index=True)
    payment_method_id = Column(
        String, ForeignKey("payment_methods.id", ondelete="SET NULL"), nullable=True, index=True
    )
    payment_status = Column(String, nullable=True, default=PaymentStatus.COMPLETED.value, index=True)
    reference_number = Column(String, nullable=True)
    invoice_number = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    attachments = Column(Text, nullable=True)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=0)
    due_amount = Column(Numeric(12, 2), nullable=True, default=0)
    net_amount = Column(Numeric(12, 2), Computed(NET_AMOUNT_EXPRESSION, persisted=True))
    currency = Column(String, nullable=True, default="USD")
    exchange_rate = Column(Numeric(12, 6), nullable=True, default=1)
    is_recurring = Column(Boolean, nullable=True, default=False)
    recurring_frequency = Column(String, nullable=True)
    recurring_end_date = Column(Date, nullable=True)
    parent_transaction_id = Column(String, ForeignKey("transactions.id"), nullable=True)
    created_by = Column(
        String, ForeignKey("users.id"), nullable=False, default=DEFAULT_USER_ID, index=True
    )
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    deleted_at = Column(DateTime, nullable=True, index=True)

    __table_args__ = (
        _in_check("type", TRANSACTION_TYPES, "ck_transactions_type"),
        _in_check("payment_status", PAYMENT_STATUSES, "ck_transactions_payment_status"),
        _in_check("recurring_frequency", RECURRING_FREQUENCIES, "ck_transactions_recurring_frequency"),
        CheckConstraint("amount >= 0", name="ck_transactions_amount_non_negative"),
        CheckConstraint("length(trim(description)) > 0", name="ck_transactions_description_not_empty"),
        CheckConstraint(
            "is_recurring IS NULL OR is_recurring = 0 OR recurring_frequency IS NOT NULL",
            name="ck_transactions_recurring_needs_frequency",
        ),
    )


# Legacy tables kept in the schema contract; no service reads or writes them.


class SimpleTransaction(Base):
    """Pre-foreign-key transaction table with free-text category/payment method."""

    __tablename__ = "simple_transactions"

    id = Column(String, primary_key=True, default=new_id)
    type = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    transaction_date = Column(Date, nullable=False, index=True)
    category = Column(String, nullable=True)
    tags = Column(Text, nullable=True)
    customer_vendor = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    payment_status = Column(String, nullable=True, default=PaymentStatus.COMPLETED.value)
    reference_number = Column(String, nullable=True)
    invoice_number = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    attachments = Column(Text, nullable=True)
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=0)
    net_amount = Column(Numeric(12, 2), Computed(NET_AMOUNT_EXPRESSION, persisted=True))
    currency = Column(String, nullable=True, default="USD")
    exchange_rate = Column(Numeric(12, 6), nullable=True, default=1)
    is_recurring = Column(Boolean, nullable=True, default=False)
    recurring_frequency = Column(String, nullable=True)
    recurring_end_date = Column(Date, nullable=True)
    parent_transaction_id = Column(String, ForeignKey("simple_transactions.id"), nullable=True)
    created_by = Column(String, ForeignKey("users.id"), nullable=False, default=DEFAULT_USER_ID)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    __table_args__ = (
        _in_check("type", TRANSACTION_TYPES, "ck_simple_transactions_type"),
        CheckConstraint("amount >= 0", name="ck_simple_transactions_amount_non_negative"),
    )


class TransactionTemplate(Base):
    """Saved transaction presets."""

    __tablename__ = "transaction_templates"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    description = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=True)
    category = Column(String, nullable=True)
    tags = Column(Text, nullable=True)
    customer_vendor = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    tax_amount = Column(Numeric(12, 2), nullable=True, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=True, default=0)
    notes = Column(Text, nullable=True)
    usage_count = Column(Integer, nullable=True, default=0)
    is_favorite = Column(Boolean, nullable=True, default=False)
    created_by = Column(String, ForeignKey("users.id"), nullable=False, default=DEFAULT_USER_ID)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (_in_check("type", TRANSACTION_TYPES, "ck_transaction_templates_type"),)


class SavedTransactionFilter(Base):
    """Named filter configurations stored as JSON text."""

    __tablename__ = "saved_transaction_filters"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    filter_config = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=True, default=False)
    created_by = Column(String, ForeignKey("users.id"), nullable=False, default=DEFAULT_USER_ID)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)


def create_db_engine(database_url: str) -> Engine:
    """Create an engine holding exactly one connection, with foreign keys on."""
    engine = create_engine(
        database_url,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory bound to engine."""
    return sessionmaker(bind=engine)
