"""Mapper functions to convert SQLAlchemy models into domain entities."""

from cashflow.domain import entities as domain
from cashflow.database.models import (
    Category as ORMCategory,
    PaymentMethod as ORMPaymentMethod,
    Transaction as ORMTransaction,
)


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=orm_category.type,
        color=orm_category.color,
        icon=orm_category.icon,
        parent_id=orm_category.parent_id,
        is_active=bool(orm_category.is_active),
        created_at=orm_category.created_at,
        updated_at=orm_category.updated_at,
    )


def payment_method_to_domain(orm_method: ORMPaymentMethod) -> domain.PaymentMethod:
    """Convert SQLAlchemy PaymentMethod model to domain PaymentMethod entity."""
    return domain.PaymentMethod(
        id=orm_method.id,
        name=orm_method.name,
        description=orm_method.description,
        is_active=bool(orm_method.is_active),
        created_at=orm_method.created_at,
        updated_at=orm_method.updated_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        type=orm_transaction.type,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        transaction_date=orm_transaction.transaction_date,
        category_id=orm_transaction.category_id,
        tags=orm_transaction.tags,
        customer_vendor=orm_transaction.customer_vendor,
        payment_method_id=orm_transaction.payment_method_id,
        payment_status=orm_transaction.payment_status,
        reference_number=orm_transaction.reference_number,
        invoice_number=orm_transaction.invoice_number,
        notes=orm_transaction.notes,
        attachments=orm_transaction.attachments,
        tax_amount=orm_transaction.tax_amount,
        discount_amount=orm_transaction.discount_amount,
        due_amount=orm_transaction.due_amount,
        net_amount=orm_transaction.net_amount,
        currency=orm_transaction.currency,
        exchange_rate=orm_transaction.exchange_rate,
        is_recurring=orm_transaction.is_recurring,
        recurring_frequency=orm_transaction.recurring_frequency,
        recurring_end_date=orm_transaction.recurring_end_date,
        parent_transaction_id=orm_transaction.parent_transaction_id,
        created_by=orm_transaction.created_by,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
        deleted_at=orm_transaction.deleted_at,
    )
