"""Category domain service."""

import logging
from typing import TYPE_CHECKING

from cashflow.domain.entities import Category as CategoryEntity, CategoryInput, CategoryType
from cashflow.domain import errors

if TYPE_CHECKING:
    from cashflow.database.base import Database

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: "Database"):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, params: CategoryInput) -> CategoryEntity:
        """Create a category.

        Raises:
            ConflictError: If the name is already taken
            ValidationError: If the type is not income, expense or both, or the
                parent does not exist
        """
        category = self.db.create_category(
            name=params.name,
            category_type=params.type,
            color=params.color or None,
            icon=params.icon or None,
            parent_id=params.parent_id or None,
            is_active=params.is_active,
        )
        logger.info(f"Created category {category.id} '{category.name}'")
        return category

    def get_category(self, category_id: str) -> CategoryEntity:
        """Get category by ID.

        Raises:
            NotFoundError: If category doesn't exist
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise errors.NotFoundError(errors.category_not_found(category_id))
        return category

    def get_category_by_name(self, name: str) -> CategoryEntity:
        """Get category by name.

        Raises:
            NotFoundError: If category doesn't exist
        """
        category = self.db.get_category_by_name(name)
        if category is None:
            raise errors.NotFoundError(errors.category_name_not_found(name))
        return category

    def list_categories(self) -> list[CategoryEntity]:
        """List all categories ordered by name."""
        return self.db.list_categories()

    def list_active_categories(self) -> list[CategoryEntity]:
        """List categories that have not been deactivated."""
        return self.db.list_categories(active_only=True)

    def list_categories_by_type(self, category_type: str) -> list[CategoryEntity]:
        """List categories usable for a type.

        Asking for income or expense also returns categories of type "both".
        """
        types = [category_type]
        if category_type in (CategoryType.INCOME.value, CategoryType.EXPENSE.value):
            types.append(CategoryType.BOTH.value)
        return self.db.list_categories(category_types=types)

    def update_category(self, category_id: str, params: CategoryInput) -> CategoryEntity:
        """Replace every field of a category.

        Raises:
            NotFoundError: If category doesn't exist
            ConflictError: If the new name is already taken
        """
        category = self.db.update_category(
            category_id,
            name=params.name,
            category_type=params.type,
            color=params.color or None,
            icon=params.icon or None,
            parent_id=params.parent_id or None,
            is_active=params.is_active,
        )
        logger.info(f"Updated category {category_id}")
        return category

    def check_dependencies(self, category_id: str) -> int:
        """Return the number of live transactions using a category."""
        return self.db.count_transactions_by_category(category_id)

    def delete_category(self, category_id: str) -> None:
        """Delete a category that no live transaction uses.

        Raises:
            NotFoundError: If category doesn't exist
            DependencyError: If transactions still reference it (carries the count)
        """
        self.get_category(category_id)

        count = self.check_dependencies(category_id)
        if count > 0:
            raise errors.DependencyError(errors.delete_blocked("category", category_id, count), count)

        self.db.delete_category(category_id)
        logger.info(f"Deleted category {category_id}")

    def deactivate_category(self, category_id: str) -> None:
        """Mark a category inactive. Allowed regardless of dependencies.

        Raises:
            NotFoundError: If category doesn't exist
        """
        self.db.deactivate_category(category_id)
        logger.info(f"Deactivated category {category_id}")
