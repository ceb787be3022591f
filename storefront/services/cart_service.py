"""
Cart workflow: one cart per user, line items with upsert semantics.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError

from storefront.core.config import settings
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.crud import cart as crud_cart
from storefront.crud import product as crud_product
from storefront.crud import user as crud_user
from storefront.models import Cart, CartItem, Product
from storefront.services.base import BaseService

logger = logging.getLogger(__name__)


def _positive_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("Quantity must be a positive integer.")
    return quantity


def _line(item: CartItem) -> Dict[str, Any]:
    price = Decimal(item.product.price)
    return {
        "cart_id": item.cart_id,
        "product_id": item.product_id,
        "quantity": item.quantity,
        "name": item.product.name,
        "price": price,
        "image": item.product.image,
        "line_total": price * item.quantity,
    }


class CartService(BaseService):

    def get_or_create_cart(self, user_id: int) -> Cart:
        """Return the user's cart, creating it on first use.

        The unique index on ``carts.user_id`` decides concurrent first adds:
        the losing insert rolls back and reads the winner's row.
        """
        cart = crud_cart.get_cart_by_user(self.db, user_id)
        if cart:
            return cart

        if not crud_user.get_user(self.db, user_id):
            raise NotFoundError(f"User with ID {user_id} not found.")

        try:
            cart = crud_cart.create_cart(self.db, user_id)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            cart = crud_cart.get_cart_by_user(self.db, user_id)
            if cart is None:
                raise ConflictError("Could not create cart.")
            return cart

        logger.info(f"Cart {cart.id} created for user {user_id}")
        return cart

    def get_cart(self, cart_id: int) -> Cart:
        with self.reading("Failed to retrieve cart."):
            cart = crud_cart.get_cart(self.db, cart_id)
        if not cart:
            raise NotFoundError("Cart not found.")
        return cart

    def delete_cart(self, cart_id: int) -> None:
        cart = self.get_cart(cart_id)
        with self.transaction(failure_message="Failed to delete cart."):
            crud_cart.delete_cart(self.db, cart)
        logger.info(f"Cart {cart_id} deleted")

    def _get_product(self, product_id: int) -> Product:
        product = crud_product.get_product(self.db, product_id)
        if not product:
            raise NotFoundError(f"Product with ID {product_id} not found.")
        return product

    def _check_stock(self, product: Product, wanted: int) -> None:
        if settings.ENFORCE_STOCK_ON_CART and wanted > product.stock_quantity:
            raise ValidationError(f"Only {product.stock_quantity} items of '{product.name}' available.")

    def add_item(self, cart_id: int, product_id: int, quantity: int) -> Dict[str, int]:
        """Add ``quantity`` of a product; an existing line accumulates instead of duplicating."""
        quantity = _positive_quantity(quantity)
        self.get_cart(cart_id)
        product = self._get_product(product_id)

        current = crud_cart.get_item_quantity(self.db, cart_id, product_id) or 0
        self._check_stock(product, current + quantity)

        with self.transaction(failure_message="Failed to add item to cart."):
            crud_cart.upsert_item(self.db, cart_id, product_id, quantity)

        total = crud_cart.get_item_quantity(self.db, cart_id, product_id)
        logger.info(f"Cart {cart_id}: product {product_id} +{quantity} (now {total})")
        return {"cart_id": cart_id, "product_id": product_id, "quantity": total}

    def update_quantity(self, cart_id: int, product_id: int, quantity: int) -> Dict[str, int]:
        """Set a line's quantity. Zero or negative values are rejected; use remove_item."""
        quantity = _positive_quantity(quantity)
        self.get_cart(cart_id)
        product = self._get_product(product_id)
        self._check_stock(product, quantity)

        with self.transaction(failure_message="Failed to update item quantity."):
            updated = crud_cart.set_item_quantity(self.db, cart_id, product_id, quantity)
            if not updated:
                raise NotFoundError("Item not found in cart.")

        return {"cart_id": cart_id, "product_id": product_id, "quantity": quantity}

    def remove_item(self, cart_id: int, product_id: int) -> bool:
        self.get_cart(cart_id)
        with self.transaction(failure_message="Failed to remove item from cart."):
            removed = crud_cart.remove_item(self.db, cart_id, product_id)
        return bool(removed)

    def clear(self, cart_id: int) -> int:
        self.get_cart(cart_id)
        with self.transaction(failure_message="Failed to clear cart."):
            removed = crud_cart.clear_cart(self.db, cart_id)
        logger.info(f"Cart {cart_id} cleared ({removed} lines)")
        return removed

    def list_items(self, cart_id: int) -> List[Dict[str, Any]]:
        """Lines joined with the product's *current* name, price and image."""
        self.get_cart(cart_id)
        with self.reading("Failed to retrieve cart items."):
            items = crud_cart.list_items(self.db, cart_id)

        return [_line(item) for item in items]

    def get_item(self, cart_id: int, product_id: int) -> Dict[str, Any]:
        self.get_cart(cart_id)
        with self.reading("Failed to retrieve cart item."):
            item = crud_cart.get_item(self.db, cart_id, product_id)
        if not item:
            raise NotFoundError("Item not found in cart.")
        return _line(item)

    def cart_contents(self, cart_id: int) -> Dict[str, Any]:
        items = self.list_items(cart_id)
        total = sum((item["line_total"] for item in items), Decimal("0"))
        return {"cart_id": cart_id, "items": items, "total": total}
