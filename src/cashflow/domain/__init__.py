"""Domain layer for cashflow application."""

from cashflow.domain.transaction import TransactionService
from cashflow.domain.category import CategoryService
from cashflow.domain.payment_method import PaymentMethodService
from cashflow.domain.presentation import TransactionPresenter

__all__ = [
    "TransactionService",
    "CategoryService",
    "PaymentMethodService",
    "TransactionPresenter",
]
