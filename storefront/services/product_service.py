import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from storefront.core.config import settings
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.crud import category as crud_category
from storefront.crud import product as crud_product
from storefront.models import Product
from storefront.services.base import BaseService

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ["name", "description", "price", "stock_quantity", "category_id", "image"]


def to_money(value) -> Decimal:
    try:
        return Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Price must be a number.")


class ProductService(BaseService):

    def list_products(self) -> List[Product]:
        with self.reading("Failed to retrieve products."):
            return crud_product.list_products(self.db)

    def get_product(self, product_id: int) -> Product:
        with self.reading("Failed to retrieve product."):
            product = crud_product.get_product(self.db, product_id)
        if not product:
            raise NotFoundError(f"Product with ID {product_id} not found.")
        return product

    def list_by_category(self, category_id: int) -> List[Product]:
        with self.reading("Failed to retrieve products."):
            return crud_product.list_products_by_category(self.db, category_id)

    def search(self, query: str) -> List[Product]:
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query cannot be empty.")
        with self.reading("Failed to search products."):
            return crud_product.search_products(self.db, query)

    def featured(self, limit: int = None) -> List[Product]:
        limit = limit or settings.FEATURED_PRODUCTS_LIMIT
        if limit <= 0:
            raise ValidationError("Limit must be a positive number.")
        with self.reading("Failed to retrieve products."):
            return crud_product.featured_products(self.db, limit)

    def _validate(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        if "name" in fields:
            fields["name"] = (fields["name"] or "").strip()
            if not fields["name"]:
                raise ValidationError("Product name is required.")
        if "price" in fields:
            fields["price"] = to_money(fields["price"])
            if fields["price"] <= 0:
                raise ValidationError("Price must be greater than 0.")
        if "stock_quantity" in fields:
            if fields["stock_quantity"] is None or int(fields["stock_quantity"]) < 0:
                raise ValidationError("Stock quantity cannot be negative.")
        if "category_id" in fields:
            if not crud_category.get_category(self.db, fields["category_id"]):
                raise NotFoundError(f"Category with ID {fields['category_id']} not found.")
        if "description" in fields and fields["description"] is None:
            fields["description"] = ""
        return fields

    def create_product(self, data: Dict[str, Any]) -> Product:
        fields = {key: data.get(key) for key in PRODUCT_FIELDS if key in data}
        for required in ("name", "price", "category_id"):
            if fields.get(required) in (None, ""):
                raise ValidationError(f"{required.replace('_', ' ').capitalize()} is required.")
        fields.setdefault("stock_quantity", 0)
        fields = self._validate(fields)

        with self.transaction(failure_message="Failed to add product."):
            product = crud_product.create_product(self.db, **fields)

        self.db.refresh(product)
        logger.info(f"Product {product.id} '{product.name}' created")
        return product

    def update_product(self, product_id: int, data: Dict[str, Any]) -> Product:
        product = self.get_product(product_id)
        # image is the only column that may be cleared with null
        fields = {
            key: value
            for key, value in data.items()
            if key in PRODUCT_FIELDS and (value is not None or key == "image")
        }
        fields = self._validate(fields)

        with self.transaction(failure_message="Failed to update product."):
            crud_product.update_product(self.db, product, **fields)

        self.db.refresh(product)
        logger.info(f"Product {product_id} updated")
        return product

    def adjust_stock(self, product_id: int, delta: int) -> Product:
        """Add ``delta`` (negative to remove) to the stock; stock never goes below zero."""
        product = self.get_product(product_id)
        new_quantity = product.stock_quantity + int(delta)
        if new_quantity < 0:
            raise ValidationError(
                f"Stock cannot go negative: {product.stock_quantity} in stock, adjustment {delta}."
            )

        with self.transaction(failure_message="Failed to update stock."):
            crud_product.update_product(self.db, product, stock_quantity=new_quantity)

        self.db.refresh(product)
        logger.info(f"Stock of product {product_id} adjusted by {delta} to {new_quantity}")
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        if crud_product.count_order_lines_for_product(self.db, product_id):
            raise ConflictError("Cannot delete product: it is part of existing orders.")

        # Cart lines holding the product go with it (ON DELETE CASCADE)
        with self.transaction(conflict_message="Cannot delete product: it is still referenced.",
                              failure_message="Failed to delete product."):
            crud_product.delete_product(self.db, product)

        logger.info(f"Product {product_id} deleted")
