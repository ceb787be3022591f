from decimal import Decimal

import pytest

from storefront.core.errors import NotFoundError, ValidationError
from storefront.crud import cart as crud_cart
from storefront.services.cart_service import CartService
from storefront.services.product_service import ProductService


def test_get_or_create_cart_is_idempotent(db, user):
    svc = CartService(db)
    first = svc.get_or_create_cart(user.id)
    second = svc.get_or_create_cart(user.id)
    assert first.id == second.id
    assert first.user_id == user.id


def test_cart_for_unknown_user(db):
    with pytest.raises(NotFoundError):
        CartService(db).get_or_create_cart(12345)


def test_adding_twice_accumulates_one_line(db, user, product):
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)

    svc.add_item(cart.id, product.id, 2)
    result = svc.add_item(cart.id, product.id, 3)

    assert result["quantity"] == 5
    items = svc.list_items(cart.id)
    assert len(items) == 1
    assert items[0]["quantity"] == 5
    assert items[0]["line_total"] == Decimal("50.00")


def test_add_rejects_non_positive_quantity(db, user, product):
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)
    for quantity in (0, -1):
        with pytest.raises(ValidationError):
            svc.add_item(cart.id, product.id, quantity)
    assert svc.list_items(cart.id) == []


def test_add_beyond_stock_is_rejected(db, user, make_product):
    scarce = make_product(name="Scarce", stock=3)
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)
    svc.add_item(cart.id, scarce.id, 2)
    with pytest.raises(ValidationError):
        svc.add_item(cart.id, scarce.id, 2)
    assert svc.list_items(cart.id)[0]["quantity"] == 2


def test_update_quantity(db, user, product):
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)
    svc.add_item(cart.id, product.id, 1)

    svc.update_quantity(cart.id, product.id, 4)
    assert svc.list_items(cart.id)[0]["quantity"] == 4

    with pytest.raises(ValidationError):
        svc.update_quantity(cart.id, product.id, 0)


def test_update_missing_line(db, user, product):
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)
    with pytest.raises(NotFoundError) as exc:
        svc.update_quantity(cart.id, product.id, 1)
    assert exc.value.message == "Item not found in cart."


def test_remove_and_clear(db, user, make_product):
    a = make_product(name="A")
    b = make_product(name="B")
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)
    svc.add_item(cart.id, a.id, 1)
    svc.add_item(cart.id, b.id, 1)

    assert svc.remove_item(cart.id, a.id) is True
    assert svc.remove_item(cart.id, a.id) is False
    assert svc.clear(cart.id) == 1
    assert svc.cart_contents(cart.id) == {"cart_id": cart.id, "items": [], "total": Decimal("0")}


def test_cart_shows_current_price(db, user, product):
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)
    svc.add_item(cart.id, product.id, 2)

    ProductService(db).update_product(product.id, {"price": 12})
    contents = svc.cart_contents(cart.id)
    assert contents["items"][0]["price"] == Decimal("12.00")
    assert contents["total"] == Decimal("24.00")


def test_deleting_product_removes_cart_lines(db, user, product):
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)
    svc.add_item(cart.id, product.id, 1)

    ProductService(db).delete_product(product.id)
    assert svc.list_items(cart.id) == []


def test_concurrent_first_cart_returns_winner(db, session_factory, user, monkeypatch):
    find_cart = crud_cart.get_cart_by_user
    winner = {}

    def find_then_lose_race(session, user_id):
        cart = find_cart(session, user_id)
        if cart is None and not winner:
            # another request creates the cart between our lookup and our insert
            other = session_factory()
            try:
                winner["id"] = crud_cart.create_cart(other, user_id).id
                other.commit()
            finally:
                other.close()
        return cart

    monkeypatch.setattr(crud_cart, "get_cart_by_user", find_then_lose_race)

    cart = CartService(db).get_or_create_cart(user.id)
    assert cart.id == winner["id"]


def test_get_single_line(db, user, product):
    svc = CartService(db)
    cart = svc.get_or_create_cart(user.id)
    svc.add_item(cart.id, product.id, 2)

    line = svc.get_item(cart.id, product.id)
    assert line["quantity"] == 2
    assert line["line_total"] == Decimal("20.00")

    with pytest.raises(NotFoundError):
        svc.get_item(cart.id, 999)
