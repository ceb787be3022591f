import logging
from typing import Dict, List

from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.crud import category as crud_category
from storefront.models import Category
from storefront.services.base import BaseService

logger = logging.getLogger(__name__)


def _category_dict(category: Category, product_count: int = 0) -> Dict:
    return {"id": category.id, "name": category.name, "product_count": product_count}


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name cannot be empty.")
    return name


class CategoryService(BaseService):

    def list_categories(self) -> List[Dict]:
        with self.reading("Failed to retrieve categories."):
            rows = crud_category.list_categories_with_counts(self.db)
        return [_category_dict(category, count) for category, count in rows]

    def get_category(self, category_id: int) -> Category:
        with self.reading("Failed to retrieve category."):
            category = crud_category.get_category(self.db, category_id)
        if not category:
            raise NotFoundError(f"Category with ID {category_id} not found.")
        return category

    def get_category_details(self, category_id: int) -> Dict:
        category = self.get_category(category_id)
        return _category_dict(category, crud_category.count_products_in_category(self.db, category_id))

    def create_category(self, name: str) -> Dict:
        name = _clean_name(name)
        if crud_category.get_category_by_name(self.db, name):
            raise ConflictError(f"Category '{name}' already exists.")

        with self.transaction(conflict_message=f"Category '{name}' already exists.",
                              failure_message="Failed to add category."):
            category = crud_category.create_category(self.db, name)

        logger.info(f"Category {category.id} '{name}' created")
        return _category_dict(category)

    def update_category(self, category_id: int, name: str) -> Dict:
        name = _clean_name(name)
        category = self.get_category(category_id)

        existing = crud_category.get_category_by_name(self.db, name)
        if existing and existing.id != category.id:
            raise ConflictError(f"Category '{name}' already exists.")

        with self.transaction(conflict_message=f"Category '{name}' already exists.",
                              failure_message="Failed to update category."):
            category.name = name
            self.db.flush()

        logger.info(f"Category {category_id} renamed to '{name}'")
        return self.get_category_details(category_id)

    def delete_category(self, category_id: int) -> None:
        """Delete a category that no product references.

        Referenced categories are refused with a conflict; nothing cascades.
        """
        category = self.get_category(category_id)
        if crud_category.count_products_in_category(self.db, category_id):
            logger.warning(f"Refusing to delete category {category_id}: products still reference it")
            raise ConflictError("Cannot delete category: products still reference it.")

        with self.transaction(conflict_message="Cannot delete category: products still reference it.",
                              failure_message="Failed to delete category."):
            crud_category.delete_category(self.db, category)

        logger.info(f"Category {category_id} deleted")
