"""
Payment record. There is no gateway behind it: once the checks pass the
payment is stored as completed.
"""

import logging
from typing import Any, List, Optional

from storefront.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from storefront.crud import order as crud_order
from storefront.crud import payment as crud_payment
from storefront.models import Payment
from storefront.services.base import BaseService
from storefront.services.product_service import to_money

logger = logging.getLogger(__name__)

ALREADY_PAID = "Payment already processed for this order."


class PaymentService(BaseService):

    def process_payment(self, order_id: int, user_id: int, amount: Optional[Any] = None) -> Payment:
        order = crud_order.get_order(self.db, order_id)
        if not order:
            raise NotFoundError("Order not found.")
        if order.user_id != user_id:
            logger.warning(f"Payment for order {order_id} refused: user {user_id} is not the owner")
            raise AuthorizationError("Invalid order or user mismatch.")

        if amount is None:
            amount = order.total_price
        amount = to_money(amount)
        if amount != to_money(order.total_price):
            raise ValidationError(f"Payment amount {amount} does not match the order total {order.total_price}.")

        # Fast path only; the unique index on payments.order_id is what decides races
        if crud_payment.get_payment_for_order(self.db, order_id):
            raise ConflictError(ALREADY_PAID)

        with self.transaction(conflict_message=ALREADY_PAID, failure_message="Failed to process payment."):
            payment = crud_payment.create_payment(self.db, order_id, user_id, amount)

        self.db.refresh(payment)
        logger.info(f"Payment {payment.id} recorded for order {order_id}")
        return payment

    def get_payments_for_order(self, order_id: int) -> List[Payment]:
        with self.reading("Failed to retrieve payments."):
            return crud_payment.list_payments_for_order(self.db, order_id)
