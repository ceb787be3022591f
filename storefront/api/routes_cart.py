from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.authz import Action, enforce
from storefront.core.security import Identity
from storefront.db.deps import get_current_identity, get_db, require
from storefront.schemas.cart import (
    CartContents,
    CartCreate,
    CartItemAdded,
    CartItemCreate,
    CartItemOut,
    CartItemUpdate,
    CartOut,
)
from storefront.schemas.common import Envelope, ok
from storefront.services.cart_service import CartService

router = APIRouter()


def _owned_cart(svc: CartService, cart_id: int, identity: Identity, action: Action):
    # 404 before 403: ownership is only known once the cart is loaded
    cart = svc.get_cart(cart_id)
    enforce(identity, action, owner_id=cart.user_id)
    return cart


# Carts

@router.post("/carts", response_model=Envelope[CartOut], status_code=201)
def create_cart(
    data: CartCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    enforce(identity, Action.create_cart, owner_id=data.user_id)
    cart = CartService(db).get_or_create_cart(data.user_id)
    return ok(CartOut.model_validate(cart))


@router.get("/carts/mine", response_model=Envelope[CartContents])
def get_my_cart(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    svc = CartService(db)
    cart = svc.get_or_create_cart(identity.id)
    return ok(svc.cart_contents(cart.id))


@router.get("/carts/{cart_id}", response_model=Envelope[CartOut])
def get_cart(
    cart_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    cart = _owned_cart(CartService(db), cart_id, identity, Action.read_cart)
    return ok(CartOut.model_validate(cart))


@router.delete("/carts/{cart_id}", response_model=Envelope[None])
def delete_cart(
    cart_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.delete_cart)),
):
    CartService(db).delete_cart(cart_id)
    return ok(message="Cart deleted successfully.")


# Cart items

@router.post("/cart-items", response_model=Envelope[CartItemAdded], status_code=201)
def add_cart_item(
    data: CartItemCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require(Action.add_to_own_cart)),
):
    """Add to the caller's own cart, creating it on first use."""
    svc = CartService(db)
    cart = svc.get_or_create_cart(identity.id)
    line = svc.add_item(cart.id, data.product_id, data.quantity)
    return ok(line, "Item added to cart")


@router.delete("/cart-items/clear/{cart_id}", response_model=Envelope[dict])
def clear_cart(
    cart_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    svc = CartService(db)
    _owned_cart(svc, cart_id, identity, Action.modify_cart)
    removed = svc.clear(cart_id)
    return ok({"removed": removed}, "Cart cleared")


@router.get("/cart-items/{cart_id}", response_model=Envelope[List[CartItemOut]])
def list_cart_items(
    cart_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    svc = CartService(db)
    _owned_cart(svc, cart_id, identity, Action.read_cart)
    return ok(svc.list_items(cart_id))


@router.get("/cart-items/{cart_id}/{product_id}", response_model=Envelope[CartItemOut])
def get_cart_item(
    cart_id: int,
    product_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    svc = CartService(db)
    _owned_cart(svc, cart_id, identity, Action.read_cart)
    return ok(svc.get_item(cart_id, product_id))


@router.put("/cart-items/{cart_id}/{product_id}", response_model=Envelope[CartItemAdded])
def update_cart_item(
    cart_id: int,
    product_id: int,
    data: CartItemUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    svc = CartService(db)
    _owned_cart(svc, cart_id, identity, Action.modify_cart)
    return ok(svc.update_quantity(cart_id, product_id, data.quantity), "Quantity updated")


@router.delete("/cart-items/{cart_id}/{product_id}", response_model=Envelope[dict])
def remove_cart_item(
    cart_id: int,
    product_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    svc = CartService(db)
    _owned_cart(svc, cart_id, identity, Action.modify_cart)
    removed = svc.remove_item(cart_id, product_id)
    return ok({"removed": removed}, "Item removed")
