"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input, or a value rejected by a storage constraint."""


class NotFoundError(DomainError):
    """Requested entity does not exist or has been soft-deleted."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""

    def __init__(self, message: str, count: int):
        super().__init__(message)
        self.count = count


class StorageError(DomainError):
    """Storage engine failure that is not a constraint violation."""


class StorageUnavailableError(StorageError):
    """The database file could not be opened or initialized."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def payment_method_not_found(payment_method_id: str) -> str:
    """Return message for missing payment method by ID."""
    return f"Payment method {payment_method_id} not found"


def payment_method_name_not_found(name: str) -> str:
    """Return message for missing payment method by name."""
    return f"Payment method '{name}' not found"


def delete_blocked(entity: str, entity_id: str, transaction_count: int) -> str:
    """Return message when an entity is still referenced by live transactions."""
    return (
        f"Cannot delete {entity} {entity_id}: it is used in "
        f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}. "
        "Deactivate it or reassign the transactions first."
    )
