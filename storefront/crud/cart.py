from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.models import Cart, CartItem


def get_cart(db: Session, cart_id: int) -> Optional[Cart]:
    return db.query(Cart).filter(Cart.id == cart_id).first()


def get_cart_by_user(db: Session, user_id: int) -> Optional[Cart]:
    return db.query(Cart).filter(Cart.user_id == user_id).first()


def create_cart(db: Session, user_id: int) -> Cart:
    cart = Cart(user_id=user_id)
    db.add(cart)
    db.flush()
    return cart


def delete_cart(db: Session, cart: Cart) -> None:
    db.delete(cart)
    db.flush()


def get_item_quantity(db: Session, cart_id: int, product_id: int) -> Optional[int]:
    return db.execute(
        select(CartItem.quantity).where(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
    ).scalar_one_or_none()


def _dialect_insert(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    return None


def upsert_item(db: Session, cart_id: int, product_id: int, quantity: int) -> None:
    """Insert a cart line or add ``quantity`` to the existing one in one statement."""
    insert = _dialect_insert(db)
    if insert is None:
        item = db.get(CartItem, (cart_id, product_id))
        if item is None:
            db.add(CartItem(cart_id=cart_id, product_id=product_id, quantity=quantity))
        else:
            item.quantity = item.quantity + quantity
        db.flush()
        return

    stmt = insert(CartItem).values(cart_id=cart_id, product_id=product_id, quantity=quantity)
    stmt = stmt.on_conflict_do_update(
        index_elements=[CartItem.cart_id, CartItem.product_id],
        set_={"quantity": CartItem.quantity + stmt.excluded.quantity},
    )
    db.execute(stmt)


def set_item_quantity(db: Session, cart_id: int, product_id: int, quantity: int) -> int:
    rows = (
        db.query(CartItem)
        .filter(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
        .update({CartItem.quantity: quantity}, synchronize_session=False)
    )
    return rows


def remove_item(db: Session, cart_id: int, product_id: int) -> int:
    return (
        db.query(CartItem)
        .filter(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
        .delete(synchronize_session=False)
    )


def clear_cart(db: Session, cart_id: int) -> int:
    return db.query(CartItem).filter(CartItem.cart_id == cart_id).delete(synchronize_session=False)


def list_items(db: Session, cart_id: int) -> List[CartItem]:
    return (
        db.query(CartItem)
        .filter(CartItem.cart_id == cart_id)
        .order_by(CartItem.product_id)
        .populate_existing()
        .all()
    )


def get_item(db: Session, cart_id: int, product_id: int) -> Optional[CartItem]:
    return (
        db.query(CartItem)
        .filter(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
        .populate_existing()
        .first()
    )
