from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.authz import Action, enforce
from storefront.core.security import Identity
from storefront.db.deps import get_current_identity, get_db
from storefront.schemas.common import Envelope, ok
from storefront.schemas.payment import PaymentCreate, PaymentOut
from storefront.services.order_service import OrderService
from storefront.services.payment_service import PaymentService

router = APIRouter()


@router.post("", response_model=Envelope[PaymentOut], status_code=201)
def create_payment(
    data: PaymentCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    enforce(identity, Action.create_payment, owner_id=data.user_id)
    payment = PaymentService(db).process_payment(data.order_id, data.user_id, data.total_amount)
    return ok(PaymentOut.model_validate(payment), "Payment processed")


@router.get("/order/{order_id}", response_model=Envelope[List[PaymentOut]])
def get_order_payments(
    order_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    order = OrderService(db).get_order(order_id)
    enforce(identity, Action.read_payment, owner_id=order.user_id)
    payments = PaymentService(db).get_payments_for_order(order_id)
    message = None if payments else "No payments found for the given order."
    return ok([PaymentOut.model_validate(p) for p in payments], message)
