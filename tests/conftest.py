import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.models  # noqa: F401
from storefront.core.config import settings
from storefront.core.security import create_access_token, hash_password
from storefront.crud import category as crud_category
from storefront.crud import product as crud_product
from storefront.crud import user as crud_user
from storefront.db.deps import get_db
from storefront.db.session import Base, build_engine
from storefront.main import app

PASSWORD = "secret123"


@pytest.fixture()
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_user(db, email="user@example.com", role=None, **overrides):
    fields = {
        "email": email,
        "password": hash_password(PASSWORD),
        "first_name": "Jane",
        "last_name": "Doe",
        "city": "Springfield",
        "address": "1 Main St",
        "zip": "12345",
        "role": role or settings.USER_ROLE,
    }
    fields.update(overrides)
    user = crud_user.create_user(db, **fields)
    db.commit()
    return user


def _create_product(db, name="Widget", price="10.00", stock=10, category_name="General"):
    category = crud_category.get_category_by_name(db, category_name)
    if category is None:
        category = crud_category.create_category(db, category_name)
    product = crud_product.create_product(
        db,
        name=name,
        description=f"{name} description",
        price=Decimal(price),
        stock_quantity=stock,
        category_id=category.id,
    )
    db.commit()
    return product


@pytest.fixture()
def make_user(db):
    return lambda **kwargs: _create_user(db, **kwargs)


@pytest.fixture()
def make_product(db):
    return lambda **kwargs: _create_product(db, **kwargs)


@pytest.fixture()
def auth_headers():
    def headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return headers


@pytest.fixture()
def user(db):
    return _create_user(db)


@pytest.fixture()
def other_user(db):
    return _create_user(db, email="other@example.com", first_name="John")


@pytest.fixture()
def admin(db):
    return _create_user(db, email="admin@example.com", role=settings.ADMIN_ROLE, first_name="Ada")


@pytest.fixture()
def product(db):
    return _create_product(db)
