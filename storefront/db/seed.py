"""
First-run setup: create the tables and an administrator account.

    python -m storefront.db.seed --email admin@example.com
"""

import argparse
import logging
from decimal import Decimal
from getpass import getpass

import storefront.models  # noqa: F401
from storefront.core.config import settings
from storefront.core.logging import configure_logging
from storefront.core.security import hash_password
from storefront.crud import category as crud_category
from storefront.crud import product as crud_product
from storefront.crud import user as crud_user
from storefront.db.session import Base, SessionLocal, engine

logger = logging.getLogger(__name__)

DEMO_CATALOG = {
    "Books": [("Python Basics", "19.99", 25), ("SQL Cookbook", "34.50", 10)],
    "Electronics": [("USB-C Cable", "9.90", 100), ("Wireless Mouse", "24.00", 40)],
}


def seed_admin(db, email: str, password: str, first_name: str = "Admin", last_name: str = "User"):
    """Create the admin account unless the email is already taken. Returns the user."""
    existing = crud_user.get_user_by_email(db, email)
    if existing:
        logger.info(f"User {email} already exists; leaving it unchanged")
        return existing

    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long.")

    user = crud_user.create_user(
        db,
        email=email.strip().lower(),
        password=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        city="",
        address="",
        zip="",
        role=settings.ADMIN_ROLE,
    )
    db.commit()
    logger.info(f"Administrator created: {email}")
    return user


def seed_catalog(db) -> int:
    # only seed an empty catalog
    if crud_category.count_categories(db):
        return 0

    created = 0
    for category_name, products in DEMO_CATALOG.items():
        category = crud_category.create_category(db, category_name)
        for name, price, stock in products:
            crud_product.create_product(
                db,
                name=name,
                description="",
                price=Decimal(price),
                stock_quantity=stock,
                category_id=category.id,
            )
            created += 1
    db.commit()
    logger.info(f"Demo catalog seeded with {created} products")
    return created


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create tables and an administrator account.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="prompted for when omitted")
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    parser.add_argument("--with-catalog", action="store_true", help="also add a small demo catalog")
    args = parser.parse_args(argv)

    configure_logging()
    password = args.password or getpass("Admin password: ")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin(db, args.email, password, args.first_name, args.last_name)
        if args.with_catalog:
            seed_catalog(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
