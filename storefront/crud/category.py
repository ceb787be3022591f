from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.models import Category, Product


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()


def get_category_by_name(db: Session, name: str) -> Optional[Category]:
    return db.query(Category).filter(func.lower(Category.name) == name.lower()).first()


def list_categories_with_counts(db: Session) -> List[Tuple[Category, int]]:
    return (
        db.query(Category, func.count(Product.id))
        .outerjoin(Product, Product.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name)
        .all()
    )


def count_products_in_category(db: Session, category_id: int) -> int:
    return db.query(func.count(Product.id)).filter(Product.category_id == category_id).scalar()


def create_category(db: Session, name: str) -> Category:
    category = Category(name=name)
    db.add(category)
    db.flush()
    return category


def delete_category(db: Session, category: Category) -> None:
    db.delete(category)
    db.flush()


def count_categories(db: Session) -> int:
    return db.query(func.count(Category.id)).scalar()
