"""
Credential & token service: registration, login and token issuing.
"""

import logging
from typing import Any, Dict

from storefront.core.config import settings
from storefront.core.errors import AuthenticationError, ConflictError, ValidationError
from storefront.core.security import create_access_token, hash_password, verify_password
from storefront.crud import user as crud_user
from storefront.models import User
from storefront.services.base import BaseService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["email", "password", "first_name", "last_name", "city", "address", "zip"]
PROFILE_FIELDS = ["first_name", "last_name", "city", "address", "zip"]

INVALID_CREDENTIALS = "Invalid email or password."


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def require_fields(data: Dict[str, Any], fields) -> None:
    for field in fields:
        value = data.get(field)
        if value is None or str(value).strip() == "":
            raise ValidationError(f"{_label(field)} is required.")


class AuthService(BaseService):

    def register(self, data: Dict[str, Any]) -> User:
        """Create a user with the base role.

        A ``role`` key in ``data`` is ignored: roles are only granted by an
        admin through the role change operation.
        """
        require_fields(data, REQUIRED_FIELDS)

        email = str(data["email"]).strip().lower()
        password = data["password"]
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long."
            )

        if data.get("role") and data["role"] != settings.USER_ROLE:
            logger.warning(f"Ignoring client supplied role '{data['role']}' during registration of {email}")

        if crud_user.get_user_by_email(self.db, email):
            raise ConflictError("Email already registered.")

        fields = {field: str(data[field]).strip() for field in PROFILE_FIELDS}
        with self.transaction(conflict_message="Email already registered.", failure_message="Failed to create user."):
            user = crud_user.create_user(
                self.db,
                email=email,
                password=hash_password(password),
                role=settings.USER_ROLE,
                **fields,
            )

        self.db.refresh(user)
        logger.info(f"User {user.id} registered")
        return user

    def login(self, email: str, password: str) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationError("Email and password are required.")

        with self.reading():
            user = crud_user.get_user_by_email(self.db, email.strip())

        # One message for both failures so callers cannot probe for accounts
        if not user or not verify_password(password, user.password):
            logger.warning("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)

        token = create_access_token(user)
        logger.info(f"User {user.id} logged in")
        return {"token": token, "user": user}
