"""Payment method domain service."""

import logging
from typing import TYPE_CHECKING

from cashflow.domain.entities import PaymentMethod as PaymentMethodEntity, PaymentMethodInput
from cashflow.domain import errors

if TYPE_CHECKING:
    from cashflow.database.base import Database

logger = logging.getLogger(__name__)


class PaymentMethodService:
    """Service for managing payment methods."""

    def __init__(self, db: "Database"):
        """Initialize payment method service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_payment_method(self, params: PaymentMethodInput) -> PaymentMethodEntity:
        """Create a payment method.

        Raises:
            ConflictError: If the name is already taken
        """
        method = self.db.create_payment_method(
            name=params.name,
            description=params.description or None,
            is_active=params.is_active,
        )
        logger.info(f"Created payment method {method.id} '{method.name}'")
        return method

    def get_payment_method(self, payment_method_id: str) -> PaymentMethodEntity:
        """Get payment method by ID.

        Raises:
            NotFoundError: If payment method doesn't exist
        """
        method = self.db.get_payment_method(payment_method_id)
        if method is None:
            raise errors.NotFoundError(errors.payment_method_not_found(payment_method_id))
        return method

    def get_payment_method_by_name(self, name: str) -> PaymentMethodEntity:
        """Get payment method by name.

        Raises:
            NotFoundError: If payment method doesn't exist
        """
        method = self.db.get_payment_method_by_name(name)
        if method is None:
            raise errors.NotFoundError(errors.payment_method_name_not_found(name))
        return method

    def list_payment_methods(self) -> list[PaymentMethodEntity]:
        return self.db.list_payment_methods()

    def list_active_payment_methods(self) -> list[PaymentMethodEntity]:
        return self.db.list_payment_methods(active_only=True)

    def update_payment_method(self, payment_method_id: str, params: PaymentMethodInput) -> PaymentMethodEntity:
        """Replace every field of a payment method.

        Raises:
            NotFoundError: If payment method doesn't exist
            ConflictError: If the new name is already taken
        """
        method = self.db.update_payment_method(
            payment_method_id,
            name=params.name,
            description=params.description or None,
            is_active=params.is_active,
        )
        logger.info(f"Updated payment method {payment_method_id}")
        return method

    def check_dependencies(self, payment_method_id: str) -> int:
        """Return the number of live transactions using a payment method."""
        return self.db.count_transactions_by_payment_method(payment_method_id)

    def delete_payment_method(self, payment_method_id: str) -> None:
        """Delete a payment method that no live transaction uses.

        Raises:
            NotFoundError: If payment method doesn't exist
            DependencyError: If transactions still reference it (carries the count)
        """
        self.get_payment_method(payment_method_id)

        count = self.check_dependencies(payment_method_id)
        if count > 0:
            raise errors.DependencyError(
                errors.delete_blocked("payment method", payment_method_id, count), count
            )

        self.db.delete_payment_method(payment_method_id)
        logger.info(f"Deleted payment method {payment_method_id}")

    def deactivate_payment_method(self, payment_method_id: str) -> None:
        """Mark a payment method inactive. Allowed regardless of dependencies."""
        self.db.deactivate_payment_method(payment_method_id)
        logger.info(f"Deactivated payment method {payment_method_id}")
