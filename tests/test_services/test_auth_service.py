import pytest

from storefront.core.errors import AuthenticationError, ConflictError, ValidationError
from storefront.core.security import decode_access_token
from storefront.services.auth_service import INVALID_CREDENTIALS, AuthService

REGISTRATION = {
    "email": "New@Example.com",
    "password": "secret123",
    "first_name": "Sam",
    "last_name": "Lee",
    "city": "Oslo",
    "address": "Street 1",
    "zip": "0150",
}


def test_register_ignores_requested_role(db):
    user = AuthService(db).register(dict(REGISTRATION, role="admin"))
    assert user.id is not None
    assert user.role == "user"
    assert user.email == "new@example.com"
    assert user.password != "secret123"


def test_register_duplicate_email_is_conflict(db):
    svc = AuthService(db)
    svc.register(dict(REGISTRATION))
    with pytest.raises(ConflictError) as exc:
        svc.register(dict(REGISTRATION, email="new@example.com"))
    assert exc.value.message == "Email already registered."


def test_register_requires_fields(db):
    with pytest.raises(ValidationError) as exc:
        AuthService(db).register(dict(REGISTRATION, city=" "))
    assert exc.value.message == "City is required."


def test_register_rejects_short_password(db):
    with pytest.raises(ValidationError):
        AuthService(db).register(dict(REGISTRATION, password="abc"))


def test_login_returns_token_for_user(db, user):
    result = AuthService(db).login("user@example.com", "secret123")
    identity = decode_access_token(result["token"])
    assert identity.id == user.id
    assert identity.role == "user"


def test_login_failures_share_one_message(db, user):
    svc = AuthService(db)
    with pytest.raises(AuthenticationError) as wrong_password:
        svc.login("user@example.com", "nope-nope")
    with pytest.raises(AuthenticationError) as unknown_email:
        svc.login("nobody@example.com", "secret123")
    assert wrong_password.value.message == unknown_email.value.message == INVALID_CREDENTIALS
