from typing import List, Optional

from sqlalchemy import func, or_, update
from sqlalchemy.orm import Session

from storefront.models import OrderProduct, Product


#  Get one product
def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()


#  Newest first, the order the storefront lists them in
def list_products(db: Session) -> List[Product]:
    return db.query(Product).order_by(Product.added_at.desc(), Product.id.desc()).all()


def list_products_by_category(db: Session, category_id: int) -> List[Product]:
    return (
        db.query(Product)
        .filter(Product.category_id == category_id)
        .order_by(Product.added_at.desc(), Product.id.desc())
        .all()
    )


def search_products(db: Session, query: str) -> List[Product]:
    pattern = f"%{query}%"
    return (
        db.query(Product)
        .filter(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
        .order_by(Product.added_at.desc(), Product.id.desc())
        .all()
    )


def featured_products(db: Session, limit: int) -> List[Product]:
    return db.query(Product).order_by(Product.added_at.desc(), Product.id.desc()).limit(limit).all()


def create_product(db: Session, **fields) -> Product:
    product = Product(**fields)
    db.add(product)
    db.flush()
    return product


def update_product(db: Session, product: Product, **fields) -> Product:
    for key, value in fields.items():
        setattr(product, key, value)
    db.flush()
    return product


def decrement_stock(db: Session, product_id: int, quantity: int) -> bool:
    """Guarded decrement; returns False when stock is insufficient."""
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock_quantity >= quantity)
        .values(stock_quantity=Product.stock_quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def increment_stock(db: Session, product_id: int, quantity: int) -> None:
    db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock_quantity=Product.stock_quantity + quantity)
        .execution_options(synchronize_session=False)
    )


def count_order_lines_for_product(db: Session, product_id: int) -> int:
    return db.query(func.count()).select_from(OrderProduct).filter(OrderProduct.product_id == product_id).scalar()


#  Delete product
def delete_product(db: Session, product: Product) -> None:
    db.delete(product)
    db.flush()


def count_products(db: Session) -> int:
    return db.query(func.count(Product.id)).scalar()
