"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

# Domain services import this module only under TYPE_CHECKING
from cashflow.domain.entities import (
    Category,
    PaymentMethod,
    SuggestionItem,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for cashflow.

    Lookups return None for missing rows; mutations of a missing row raise
    NotFoundError. Storage failures surface as the StorageError family.
    """

    @abstractmethod
    def connect(self) -> None:
        """Open the database, raising StorageUnavailableError on failure."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create missing tables and columns, then insert missing seed rows."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        category_type: str,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        parent_id: Optional[str] = None,
        is_active: bool = True,
    ) -> Category:
        """Create a category and return the stored row."""
        pass

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by its unique name."""
        pass

    @abstractmethod
    def list_categories(
        self, active_only: bool = False, category_types: Optional[Sequence[str]] = None
    ) -> list[Category]:
        """List categories ordered by name, optionally active-only or by type."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: str,
        name: str,
        category_type: str,
        color: Optional[str],
        icon: Optional[str],
        parent_id: Optional[str],
        is_active: bool,
    ) -> Category:
        """Replace every mutable field of a category."""
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """Physically remove a category."""
        pass

    @abstractmethod
    def deactivate_category(self, category_id: str) -> None:
        """Clear the is_active flag of a category."""
        pass

    @abstractmethod
    def count_transactions_by_category(self, category_id: str) -> int:
        """Count live transactions referencing a category."""
        pass

    # Payment method operations
    @abstractmethod
    def create_payment_method(
        self, name: str, description: Optional[str] = None, is_active: bool = True
    ) -> PaymentMethod:
        """Create a payment method and return the stored row."""
        pass

    @abstractmethod
    def get_payment_method(self, payment_method_id: str) -> Optional[PaymentMethod]:
        """Get payment method by ID."""
        pass

    @abstractmethod
    def get_payment_method_by_name(self, name: str) -> Optional[PaymentMethod]:
        """Get payment method by its unique name."""
        pass

    @abstractmethod
    def list_payment_methods(self, active_only: bool = False) -> list[PaymentMethod]:
        """List payment methods ordered by name."""
        pass

    @abstractmethod
    def update_payment_method(
        self, payment_method_id: str, name: str, description: Optional[str], is_active: bool
    ) -> PaymentMethod:
        """Replace every mutable field of a payment method."""
        pass

    @abstractmethod
    def delete_payment_method(self, payment_method_id: str) -> None:
        """Physically remove a payment method."""
        pass

    @abstractmethod
    def deactivate_payment_method(self, payment_method_id: str) -> None:
        """Clear the is_active flag of a payment method."""
        pass

    @abstractmethod
    def count_transactions_by_payment_method(self, payment_method_id: str) -> int:
        """Count live transactions referencing a payment method."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, values: dict[str, Any]) -> Transaction:
        """Insert a transaction from column values and return the stored row."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get a live (not soft-deleted) transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: str, values: dict[str, Any]) -> Transaction:
        """Overwrite columns of a live transaction and return the stored row."""
        pass

    @abstractmethod
    def soft_delete_transaction(self, transaction_id: str) -> None:
        """Mark a live transaction as deleted."""
        pass

    @abstractmethod
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
    ) -> list[Transaction]:
        """List live transactions matching every supplied filter, newest first.

        Args:
            created_by: Owner of the transactions
            start_date: Optional inclusive lower date bound
            end_date: Optional inclusive upper date bound
            types: Allowed types (empty for any)
            category_ids: Allowed category IDs (empty for any)
            payment_statuses: Allowed payment statuses (empty for any)
            payment_method_ids: Allowed payment method IDs (empty for any)
            customer_vendor_search: Case-insensitive substring of customer_vendor
            description_search: Case-insensitive substring of description
            min_due_amount: Optional inclusive lower due_amount bound
            max_due_amount: Optional inclusive upper due_amount bound
            limit: Maximum rows (None for all)
            offset: Rows to skip
        """
        pass

    @abstractmethod
    def search_transactions(
        self, created_by: str, term: str, limit: int, offset: int = 0
    ) -> list[Transaction]:
        """Substring search over the free-text columns, newest first."""
        pass

    @abstractmethod
    def get_value_suggestions(
        self,
        created_by: str,
        column: str,
        transaction_type: Optional[str],
        search: Optional[str],
        limit: int,
    ) -> list[SuggestionItem]:
        """Distinct prior values of a text column ranked by occurrence count.

        Args:
            column: "description" or "customer_vendor"
        """
        pass
