"""
Order workflow.

An order is written in one transaction: the order row, its lines with the
unit price at order time, the shipping snapshot and the stock decrements.
Totals are computed here from current prices; a total sent by the caller is
only accepted when it matches.
"""

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.crud import cart as crud_cart
from storefront.crud import order as crud_order
from storefront.crud import payment as crud_payment
from storefront.crud import product as crud_product
from storefront.crud import user as crud_user
from storefront.models import Order
from storefront.services.base import BaseService
from storefront.services.product_service import to_money

logger = logging.getLogger(__name__)


def _merge_lines(line_items: Iterable[Dict[str, Any]]) -> "OrderedDict[int, int]":
    merged = OrderedDict()
    for line in line_items:
        product_id = line.get("product_id")
        quantity = line.get("quantity")
        if product_id is None:
            raise ValidationError("Each order line needs a product_id.")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be a positive integer.")
        merged[product_id] = merged.get(product_id, 0) + quantity
    if not merged:
        raise ValidationError("An order needs at least one product.")
    return merged


def _summary(order: Order, item_count: int) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "total_price": order.total_price,
        "order_date": order.order_date,
        "item_count": item_count or 0,
        "first_name": order.user.first_name if order.user else None,
        "last_name": order.user.last_name if order.user else None,
    }


class OrderService(BaseService):

    def create_order(
        self,
        user_id: int,
        line_items: List[Dict[str, Any]],
        total_price: Optional[Any] = None,
    ) -> Order:
        user = crud_user.get_user(self.db, user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found.")

        if total_price is not None:
            total_price = to_money(total_price)
            if total_price <= 0:
                raise ValidationError("Total price must be greater than 0.")

        lines = _merge_lines(line_items)
        return self._place_order(user, lines, total_price)

    def checkout(self, user_id: int) -> Order:
        """Turn the user's cart into an order and empty the cart, atomically."""
        user = crud_user.get_user(self.db, user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found.")

        cart = crud_cart.get_cart_by_user(self.db, user_id)
        items = crud_cart.list_items(self.db, cart.id) if cart else []
        if not items:
            raise ValidationError("Cart is empty.")

        lines = _merge_lines({"product_id": i.product_id, "quantity": i.quantity} for i in items)
        return self._place_order(user, lines, None, clear_cart_id=cart.id)

    def _place_order(self, user, lines, expected_total, clear_cart_id: Optional[int] = None) -> Order:
        with self.transaction(failure_message="Failed to create order."):
            priced = []
            total = Decimal("0.00")
            for product_id, quantity in lines.items():
                product = crud_product.get_product(self.db, product_id)
                if not product:
                    raise NotFoundError(f"Product with ID {product_id} not found.")
                unit_price = to_money(product.price)
                priced.append((product, quantity, unit_price))
                total += unit_price * quantity

            if expected_total is not None and expected_total != total:
                raise ValidationError(
                    f"Total price {expected_total} does not match the order items total {total}."
                )

            for product, quantity, _ in priced:
                if not crud_product.decrement_stock(self.db, product.id, quantity):
                    raise ConflictError(f"Insufficient stock for '{product.name}'.")

            order = crud_order.create_order(
                self.db,
                user.id,
                total,
                shipping={
                    "shipping_address": user.address,
                    "shipping_city": user.city,
                    "shipping_zip": user.zip,
                },
            )
            for product, quantity, unit_price in priced:
                crud_order.add_order_product(self.db, order.id, product.id, quantity, unit_price)

            if clear_cart_id is not None:
                crud_cart.clear_cart(self.db, clear_cart_id)

        self.db.refresh(order)
        logger.info(f"Order {order.id} created for user {user.id}: {len(priced)} lines, total {total}")
        return order

    def get_order(self, order_id: int) -> Order:
        with self.reading("Failed to retrieve order."):
            order = crud_order.get_order(self.db, order_id)
        if not order:
            raise NotFoundError("Order not found.")
        return order

    def list_orders_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        with self.reading("Failed to retrieve orders."):
            rows = crud_order.list_orders_for_user(self.db, user_id)
        return [_summary(order, count) for order, count in rows]

    def list_all_orders(self) -> List[Dict[str, Any]]:
        with self.reading("Failed to retrieve orders."):
            rows = crud_order.list_all_orders(self.db)
        return [_summary(order, count) for order, count in rows]

    def get_order_products(self, order_id: int) -> List[Dict[str, Any]]:
        self.get_order(order_id)
        with self.reading("Failed to retrieve order products."):
            lines = crud_order.list_order_products(self.db, order_id)
        return [
            {
                "product_id": line.product_id,
                "product_name": line.product.name,
                "quantity": line.quantity,
                "product_price": line.unit_price,
                "item_total": line.unit_price * line.quantity,
            }
            for line in lines
        ]

    def get_order_details(self, order_id: int) -> Dict[str, Any]:
        """Order header, shipping snapshot and lines priced at order time."""
        order = self.get_order(order_id)
        return {
            "order_id": order.id,
            "user_id": order.user_id,
            "total_price": order.total_price,
            "order_date": order.order_date,
            "first_name": order.user.first_name,
            "last_name": order.user.last_name,
            "shipping_address": order.shipping_address,
            "shipping_city": order.shipping_city,
            "shipping_zip": order.shipping_zip,
            "items": self.get_order_products(order_id),
        }

    def delete_order(self, order_id: int) -> None:
        """Delete an unpaid order and put its quantities back in stock."""
        order = self.get_order(order_id)
        if crud_payment.get_payment_for_order(self.db, order_id):
            raise ConflictError("Cannot delete an order that has been paid.")

        with self.transaction(conflict_message="Cannot delete order: it is still referenced.",
                              failure_message="Failed to delete order."):
            for line in crud_order.list_order_products(self.db, order_id):
                crud_product.increment_stock(self.db, line.product_id, line.quantity)
            crud_order.delete_order(self.db, order)
        logger.info(f"Order {order_id} deleted")
