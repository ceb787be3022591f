from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.models import Order, User


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id).all()


def create_user(db: Session, **fields) -> User:
    user = User(**fields)
    db.add(user)
    db.flush()
    return user


def update_user(db: Session, user: User, **fields) -> User:
    for key, value in fields.items():
        setattr(user, key, value)
    db.flush()
    return user


def count_orders_for_user(db: Session, user_id: int) -> int:
    return db.query(func.count(Order.id)).filter(Order.user_id == user_id).scalar()


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.flush()


def count_users(db: Session) -> int:
    return db.query(func.count(User.id)).scalar()
