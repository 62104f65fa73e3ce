"""SQLAlchemy database implementation."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy import func, inspect, or_, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from cashflow.database.base import Database
from cashflow.database.models import (
    Base,
    Category,
    PaymentMethod,
    Transaction,
    create_db_engine,
    create_session_factory,
)
from cashflow.database.mappers import (
    category_to_domain,
    payment_method_to_domain,
    transaction_to_domain,
)
from cashflow.database.seeds import seed_defaults
from cashflow.domain import errors
from cashflow.domain.entities import (
    Category as DomainCategory,
    PaymentMethod as DomainPaymentMethod,
    SuggestionItem,
    Transaction as DomainTransaction,
)

logger = logging.getLogger(__name__)

# Columns added after the first schema release: name -> DDL type and default
ADDITIVE_COLUMNS = {
    "transactions": {
        "due_amount": "NUMERIC(12, 2) DEFAULT 0",
    },
}

SEARCH_COLUMNS = ("description", "customer_vendor", "reference_number", "invoice_number", "notes")
SUGGESTION_COLUMNS = ("description", "customer_vendor")


def _constraint_error(action: str, error: IntegrityError) -> errors.DomainError:
    """Translate an IntegrityError into the matching domain error."""
    detail = str(error.orig) if error.orig is not None else str(error)
    if "UNIQUE constraint failed" in detail:
        return errors.ConflictError(f"Failed to {action}: {detail}")
    return errors.ValidationError(f"Failed to {action}: {detail}")


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.engine = create_db_engine(database_url)
        self.session_factory = create_session_factory(self.engine)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    @contextmanager
    def _storage(self, action: str, commit: bool = False) -> Iterator[Session]:
        """Run a unit of work, translating storage failures into domain errors.

        The session is rolled back on any storage failure. Domain errors
        raised by the caller inside the block propagate untouched.
        """
        session = self._get_session()
        try:
            yield session
            if commit:
                session.commit()
        except IntegrityError as e:
            session.rollback()
            raise _constraint_error(action, e) from e
        except SQLAlchemyError as e:
            session.rollback()
            raise errors.StorageError(f"Failed to {action}: {e}") from e

    def connect(self) -> None:
        """Open the database file and check that it answers queries."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise errors.StorageUnavailableError(
                f"Failed to open database {self.database_url}: {e}"
            ) from e

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None
        self.engine.dispose()

    def initialize_schema(self) -> None:
        """Create missing tables and columns, then insert missing seed rows."""
        try:
            Base.metadata.create_all(self.engine)
            self._add_missing_columns()
        except SQLAlchemyError as e:
            raise errors.StorageUnavailableError(f"Failed to initialize schema: {e}") from e

        with self._storage("seed default rows", commit=True) as session:
            inserted = seed_defaults(session)
        if inserted:
            logger.info(f"Inserted {inserted} default row(s) into {self.database_url}")

    def _add_missing_columns(self) -> None:
        """Apply additive column migrations to tables created by older versions."""
        inspector = inspect(self.engine)
        statements = []
        for table, columns in ADDITIVE_COLUMNS.items():
            existing = {col["name"] for col in inspector.get_columns(table)}
            for name, ddl in columns.items():
                if name not in existing:
                    logger.info(f"Adding column {table}.{name}")
                    statements.append(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}")

        if statements:
            with self.engine.begin() as conn:
                for statement in statements:
                    conn.execute(text(statement))

    # Category operations
    def create_category(
        self,
        name: str,
        category_type: str,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        parent_id: Optional[str] = None,
        is_active: bool = True,
    ) -> DomainCategory:
        """Create a category and return the stored row."""
        with self._storage("create category", commit=True) as session:
            category = Category(
                name=name,
                type=category_type,
                color=color,
                icon=icon,
                parent_id=parent_id,
                is_active=is_active,
            )
            session.add(category)
        return self.get_category(category.id)

    def get_category(self, category_id: str) -> Optional[DomainCategory]:
        """Get category by ID."""
        with self._storage("get category") as session:
            cat = session.get(Category, category_id)
            return category_to_domain(cat) if cat is not None else None

    def get_category_by_name(self, name: str) -> Optional[DomainCategory]:
        """Get category by its unique name."""
        with self._storage("get category") as session:
            cat = session.query(Category).filter(Category.name == name).first()
            return category_to_domain(cat) if cat is not None else None

    def list_categories(
        self, active_only: bool = False, category_types: Optional[Sequence[str]] = None
    ) -> list[DomainCategory]:
        """List categories ordered by name, optionally active-only or by type."""
        with self._storage("list categories") as session:
            query = session.query(Category)
            if active_only:
                query = query.filter(Category.is_active.is_(True))
            if category_types:
                query = query.filter(Category.type.in_(list(category_types)))
            return [category_to_domain(cat) for cat in query.order_by(Category.name).all()]

    def update_category(
        self,
        category_id: str,
        name: str,
        category_type: str,
        color: Optional[str],
        icon: Optional[str],
        parent_id: Optional[str],
        is_active: bool,
    ) -> DomainCategory:
        """Replace every mutable field of a category."""
        with self._storage("update category", commit=True) as session:
            category = session.get(Category, category_id)
            if category is None:
                raise errors.NotFoundError(errors.category_not_found(category_id))
            category.name = name
            category.type = category_type
            category.color = color
            category.icon = icon
            category.parent_id = parent_id
            category.is_active = is_active
        return self.get_category(category_id)

    def delete_category(self, category_id: str) -> None:
        """Physically remove a category."""
        with self._storage("delete category", commit=True) as session:
            category = session.get(Category, category_id)
            if category is None:
                raise errors.NotFoundError(errors.category_not_found(category_id))
            session.delete(category)

    def deactivate_category(self, category_id: str) -> None:
        """Clear the is_active flag of a category."""
        with self._storage("deactivate category", commit=True) as session:
            category = session.get(Category, category_id)
            if category is None:
                raise errors.NotFoundError(errors.category_not_found(category_id))
            category.is_active = False

    def count_transactions_by_category(self, category_id: str) -> int:
        """Count live transactions referencing a category."""
        with self._storage("check category dependencies") as session:
            return (
                self._live(session)
                .filter(Transaction.category_id == category_id)
                .count()
            )

    # Payment method operations
    def create_payment_method(
        self, name: str, description: Optional[str] = None, is_active: bool = True
    ) -> DomainPaymentMethod:
        """Create a payment method and return the stored row."""
        with self._storage("create payment method", commit=True) as session:
            method = PaymentMethod(name=name, description=description, is_active=is_active)
            session.add(method)
        return self.get_payment_method(method.id)

    def get_payment_method(self, payment_method_id: str) -> Optional[DomainPaymentMethod]:
        """Get payment method by ID."""
        with self._storage("get payment method") as session:
            method = session.get(PaymentMethod, payment_method_id)
            return payment_method_to_domain(method) if method is not None else None

    def get_payment_method_by_name(self, name: str) -> Optional[DomainPaymentMethod]:
        """Get payment method by its unique name."""
        with self._storage("get payment method") as session:
            method = session.query(PaymentMethod).filter(PaymentMethod.name == name).first()
            return payment_method_to_domain(method) if method is not None else None

    def list_payment_methods(self, active_only: bool = False) -> list[DomainPaymentMethod]:
        """List payment methods ordered by name."""
        with self._storage("list payment methods") as session:
            query = session.query(PaymentMethod)
            if active_only:
                query = query.filter(PaymentMethod.is_active.is_(True))
            return [payment_method_to_domain(m) for m in query.order_by(PaymentMethod.name).all()]

    def update_payment_method(
        self, payment_method_id: str, name: str, description: Optional[str], is_active: bool
    ) -> DomainPaymentMethod:
        """Replace every mutable field of a payment method."""
        with self._storage("update payment method", commit=True) as session:
            method = session.get(PaymentMethod, payment_method_id)
            if method is None:
                raise errors.NotFoundError(errors.payment_method_not_found(payment_method_id))
            method.name = name
            method.description = description
            method.is_active = is_active
        return self.get_payment_method(payment_method_id)

    def delete_payment_method(self, payment_method_id: str) -> None:
        """Physically remove a payment method."""
        with self._storage("delete payment method", commit=True) as session:
            method = session.get(PaymentMethod, payment_method_id)
            if method is None:
                raise errors.NotFoundError(errors.payment_method_not_found(payment_method_id))
            session.delete(method)

    def deactivate_payment_method(self, payment_method_id: str) -> None:
        """Clear the is_active flag of a payment method."""
        with self._storage("deactivate payment method", commit=True) as session:
            method = session.get(PaymentMethod, payment_method_id)
            if method is None:
                raise errors.NotFoundError(errors.payment_method_not_found(payment_method_id))
            method.is_active = False

    def count_transactions_by_payment_method(self, payment_method_id: str) -> int:
        """Count live transactions referencing a payment method."""
        with self._storage("check payment method dependencies") as session:
            return (
                self._live(session)
                .filter(Transaction.payment_method_id == payment_method_id)
                .count()
            )

    # Transaction operations
    @staticmethod
    def _live(session: Session) -> Query:
        return session.query(Transaction).filter(Transaction.deleted_at.is_(None))

    @staticmethod
    def _newest_first(query: Query) -> Query:
        return query.order_by(
            Transaction.transaction_date.desc(),
            Transaction.created_at.desc(),
            Transaction.id.desc(),
        )

    def _get_live_orm_transaction(self, session: Session, transaction_id: str) -> Transaction:
        transaction = self._live(session).filter(Transaction.id == transaction_id).first()
        if transaction is None:
            raise errors.NotFoundError(errors.transaction_not_found(transaction_id))
        return transaction

    def create_transaction(self, values: dict[str, Any]) -> DomainTransaction:
        """Insert a transaction from column values and return the stored row."""
        with self._storage("create transaction", commit=True) as session:
            transaction = Transaction(**values)
            session.add(transaction)
        # Attributes expire on commit; reading them reloads net_amount and timestamps
        with self._storage("get transaction") as session:
            return transaction_to_domain(transaction)

    def get_transaction(self, transaction_id: str) -> Optional[DomainTransaction]:
        """Get a live (not soft-deleted) transaction by ID."""
        with self._storage("get transaction") as session:
            transaction = self._live(session).filter(Transaction.id == transaction_id).first()
            return transaction_to_domain(transaction) if transaction is not None else None

    def update_transaction(self, transaction_id: str, values: dict[str, Any]) -> DomainTransaction:
        """Overwrite columns of a live transaction and return the stored row."""
        with self._storage("update transaction", commit=True) as session:
            transaction = self._get_live_orm_transaction(session, transaction_id)
            for column, value in values.items():
                setattr(transaction, column, value)
        with self._storage("get transaction") as session:
            return transaction_to_domain(transaction)

    def soft_delete_transaction(self, transaction_id: str) -> None:
        """Mark a live transaction as deleted."""
        with self._storage("delete transaction", commit=True) as session:
            transaction = self._get_live_orm_transaction(session, transaction_id)
            transaction.deleted_at = datetime.now(UTC)

    def list_transactions(
        self,
        created_by: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        types: Sequence[str] = (),
        category_ids: Sequence[str] = (),
        payment_statuses: Sequence[str] = (),
        payment_method_ids: Sequence[str] = (),
        customer_vendor_search: Optional[str] = None,
        description_search: Optional[str] = None,
        min_due_amount: Optional[Decimal] = None,
        max_due_amount: Optional[Decimal] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[DomainTransaction]:
        """List live transactions matching every supplied filter, newest first."""
        with self._storage("list transactions") as session:
            query = self._live(session).filter(Transaction.created_by == created_by)

            if start_date is not None:
                query = query.filter(Transaction.transaction_date >= start_date)
            if end_date is not None:
                query = query.filter(Transaction.transaction_date <= end_date)
            if types:
                query = query.filter(Transaction.type.in_(list(types)))
            if category_ids:
                query = query.filter(Transaction.category_id.in_(list(category_ids)))
            if payment_statuses:
                query = query.filter(Transaction.payment_status.in_(list(payment_statuses)))
            if payment_method_ids:
                query = query.filter(Transaction.payment_method_id.in_(list(payment_method_ids)))
            if customer_vendor_search:
                query = query.filter(
                    Transaction.customer_vendor.icontains(customer_vendor_search, autoescape=True)
                )
            if description_search:
                query = query.filter(
                    Transaction.description.icontains(description_search, autoescape=True)
                )
            if min_due_amount is not None:
                query = query.filter(Transaction.due_amount >= min_due_amount)
            if max_due_amount is not None:
                query = query.filter(Transaction.due_amount <= max_due_amount)

            query = self._newest_first(query)
            if limit is not None:
                query = query.limit(limit)
            if offset:
                query = query.offset(offset)
            return [transaction_to_domain(txn) for txn in query.all()]

    def search_transactions(
        self, created_by: str, term: str, limit: int, offset: int = 0
    ) -> list[DomainTransaction]:
        """Substring search over the free-text columns, newest first."""
        with self._storage("search transactions") as session:
            matches = [
                getattr(Transaction, column).icontains(term, autoescape=True)
                for column in SEARCH_COLUMNS
            ]
            query = self._live(session).filter(
                Transaction.created_by == created_by, or_(*matches)
            )
            query = self._newest_first(query).limit(limit).offset(offset)
            return [transaction_to_domain(txn) for txn in query.all()]

    def get_value_suggestions(
        self,
        created_by: str,
        column: str,
        transaction_type: Optional[str],
        search: Optional[str],
        limit: int,
    ) -> list[SuggestionItem]:
        """Distinct prior values of a text column ranked by occurrence count."""
        if column not in SUGGESTION_COLUMNS:
            raise errors.ValidationError(f"Suggestions are not available for '{column}'")

        with self._storage(f"get {column} suggestions") as session:
            value_column = getattr(Transaction, column)
            frequency = func.count(Transaction.id).label("frequency")
            query = (
                session.query(value_column, frequency)
                .filter(
                    Transaction.deleted_at.is_(None),
                    Transaction.created_by == created_by,
                    value_column.is_not(None),
                    value_column != "",
                )
            )
            if transaction_type:
                query = query.filter(Transaction.type == transaction_type)
            if search:
                query = query.filter(value_column.icontains(search, autoescape=True))

            rows = (
                query.group_by(value_column)
                .order_by(frequency.desc(), value_column.asc())
                .limit(limit)
                .all()
            )
            return [SuggestionItem(value=value, frequency=count) for value, count in rows]
