from decimal import Decimal

import pytest

from storefront.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from storefront.crud import payment as crud_payment
from storefront.services.dashboard_service import DashboardService
from storefront.services.order_service import OrderService
from storefront.services.payment_service import ALREADY_PAID, PaymentService


@pytest.fixture()
def order(db, user, product):
    return OrderService(db).create_order(user.id, [{"product_id": product.id, "quantity": 2}])


def test_payment_defaults_to_order_total(db, user, order):
    payment = PaymentService(db).process_payment(order.id, user.id)
    assert payment.total_amount == Decimal("20.00")
    assert payment.payment_status == "completed"


def test_payment_amount_must_match(db, user, order):
    with pytest.raises(ValidationError):
        PaymentService(db).process_payment(order.id, user.id, 5)


def test_payment_by_other_user(db, other_user, order):
    with pytest.raises(AuthorizationError) as exc:
        PaymentService(db).process_payment(order.id, other_user.id)
    assert exc.value.message == "Invalid order or user mismatch."


def test_payment_for_missing_order(db, user):
    with pytest.raises(NotFoundError):
        PaymentService(db).process_payment(555, user.id)


def test_order_is_paid_once(db, user, order):
    svc = PaymentService(db)
    svc.process_payment(order.id, user.id)
    with pytest.raises(ConflictError) as exc:
        svc.process_payment(order.id, user.id, "20.00")
    assert exc.value.message == ALREADY_PAID
    assert len(svc.get_payments_for_order(order.id)) == 1


def test_dashboard_counts_revenue(db, user, admin, order):
    PaymentService(db).process_payment(order.id, user.id)
    stats = DashboardService(db).get_stats()
    assert stats["users"] == 2
    assert stats["orders"] == 1
    assert stats["products"] == 1
    assert stats["categories"] == 1
    assert Decimal(str(stats["revenue"])) == Decimal("20.00")


def test_concurrent_payment_is_conflict(db, session_factory, user, order, monkeypatch):
    find_payment = crud_payment.get_payment_for_order
    user_id, order_id = user.id, order.id

    def find_then_lose_race(session, order_id):
        payment = find_payment(session, order_id)
        if payment is None:
            # a second request records its payment after our check
            other = session_factory()
            try:
                crud_payment.create_payment(other, order_id, user_id, Decimal("20.00"))
                other.commit()
            finally:
                other.close()
        return payment

    monkeypatch.setattr(crud_payment, "get_payment_for_order", find_then_lose_race)

    with pytest.raises(ConflictError) as exc:
        PaymentService(db).process_payment(order_id, user_id)
    assert exc.value.message == ALREADY_PAID

    monkeypatch.undo()
    assert len(PaymentService(db).get_payments_for_order(order_id)) == 1
