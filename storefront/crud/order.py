from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.models import Order, OrderProduct


def get_order(db: Session, order_id: int) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()


def create_order(db: Session, user_id: int, total_price, shipping: dict) -> Order:
    order = Order(user_id=user_id, total_price=total_price, **shipping)
    db.add(order)
    db.flush()  # flush so order.id is available
    return order


def add_order_product(db: Session, order_id: int, product_id: int, quantity: int, unit_price) -> OrderProduct:
    line = OrderProduct(order_id=order_id, product_id=product_id, quantity=quantity, unit_price=unit_price)
    db.add(line)
    return line


def list_order_products(db: Session, order_id: int) -> List[OrderProduct]:
    return (
        db.query(OrderProduct)
        .filter(OrderProduct.order_id == order_id)
        .order_by(OrderProduct.product_id)
        .all()
    )


def _with_item_count(db: Session):
    item_count = (
        select(func.count(OrderProduct.product_id))
        .where(OrderProduct.order_id == Order.id)
        .correlate(Order)
        .scalar_subquery()
    )
    return db.query(Order, item_count.label("item_count"))


def list_orders_for_user(db: Session, user_id: int) -> List[Tuple[Order, int]]:
    # Most recent first
    return (
        _with_item_count(db)
        .filter(Order.user_id == user_id)
        .order_by(Order.order_date.desc(), Order.id.desc())
        .all()
    )


def list_all_orders(db: Session) -> List[Tuple[Order, int]]:
    return (
        _with_item_count(db)
        .order_by(Order.order_date.desc(), Order.id.desc())
        .all()
    )


def delete_order(db: Session, order: Order) -> None:
    db.delete(order)
    db.flush()


def count_orders(db: Session) -> int:
    return db.query(func.count(Order.id)).scalar()
