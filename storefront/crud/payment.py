from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.models import Payment, PAYMENT_COMPLETED


def get_payment_for_order(db: Session, order_id: int) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.order_id == order_id).first()


def list_payments_for_order(db: Session, order_id: int) -> List[Payment]:
    return db.query(Payment).filter(Payment.order_id == order_id).order_by(Payment.id).all()


def create_payment(db: Session, order_id: int, user_id: int, total_amount) -> Payment:
    payment = Payment(
        order_id=order_id,
        user_id=user_id,
        total_amount=total_amount,
        payment_status=PAYMENT_COMPLETED,
    )
    db.add(payment)
    db.flush()
    return payment


def total_revenue(db: Session):
    return (
        db.query(func.coalesce(func.sum(Payment.total_amount), 0))
        .filter(Payment.payment_status == PAYMENT_COMPLETED)
        .scalar()
    )
