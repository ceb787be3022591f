from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.authz import Action, enforce
from storefront.core.security import Identity
from storefront.db.deps import get_current_identity, get_db, require
from storefront.schemas.common import Envelope, ok
from storefront.schemas.order import OrderCreate, OrderDetails, OrderLineOut, OrderOut, OrderSummary
from storefront.services.order_service import OrderService

router = APIRouter()


@router.post("/orders", response_model=Envelope[OrderOut], status_code=201)
def create_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    enforce(identity, Action.create_order, owner_id=data.user_id)
    order = OrderService(db).create_order(
        data.user_id,
        [line.model_dump() for line in data.products],
        total_price=data.total_price,
    )
    return ok(OrderOut.model_validate(order), "Order created")


@router.post("/orders/checkout", response_model=Envelope[OrderOut], status_code=201)
def checkout(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.checkout)),
):
    """Place an order from the caller's cart and empty the cart."""
    order = OrderService(db).checkout(identity.id)
    return ok(OrderOut.model_validate(order), "Order placed")


@router.get("/orders", response_model=Envelope[List[OrderSummary]])
def list_orders(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.list_all_orders)),
):
    return ok(OrderService(db).list_all_orders())


@router.get("/orders/user/{user_id}", response_model=Envelope[List[OrderSummary]])
def list_user_orders(
    user_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    enforce(identity, Action.read_order, owner_id=user_id)
    return ok(OrderService(db).list_orders_for_user(user_id))


@router.get("/orders/{order_id}", response_model=Envelope[OrderDetails])
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    svc = OrderService(db)
    order = svc.get_order(order_id)
    enforce(identity, Action.read_order, owner_id=order.user_id)
    return ok(svc.get_order_details(order_id))


@router.delete("/orders/{order_id}", response_model=Envelope[None])
def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.delete_order)),
):
    OrderService(db).delete_order(order_id)
    return ok(message="Order deleted")


@router.get("/order-products/{order_id}", response_model=Envelope[List[OrderLineOut]])
def get_order_products(
    order_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    svc = OrderService(db)
    order = svc.get_order(order_id)
    enforce(identity, Action.read_order, owner_id=order.user_id)
    return ok(svc.get_order_products(order_id))
