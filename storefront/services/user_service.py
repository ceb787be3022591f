import logging
from typing import Any, Dict, List

from storefront.core.config import settings
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.crud import user as crud_user
from storefront.models import User
from storefront.services.auth_service import PROFILE_FIELDS, _label
from storefront.services.base import BaseService

logger = logging.getLogger(__name__)


class UserService(BaseService):

    def list_users(self) -> List[User]:
        with self.reading("Failed to retrieve users."):
            return crud_user.list_users(self.db)

    def get_user(self, user_id: int) -> User:
        with self.reading("Failed to retrieve user."):
            user = crud_user.get_user(self.db, user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found.")
        return user

    def get_user_by_email(self, email: str) -> User:
        with self.reading("Failed to retrieve user."):
            user = crud_user.get_user_by_email(self.db, email)
        if not user:
            raise NotFoundError(f"User not found with email: {email}")
        return user

    def update_profile(self, user_id: int, data: Dict[str, Any]) -> User:
        """Update only the provided profile fields; email, password and role stay as they are."""
        user = self.get_user(user_id)

        changes = {}
        for field in PROFILE_FIELDS:
            if field not in data or data[field] is None:
                continue
            value = str(data[field]).strip()
            if not value:
                raise ValidationError(f"{_label(field)} cannot be empty.")
            changes[field] = value

        if not changes:
            return user

        with self.transaction(failure_message="Failed to update user."):
            crud_user.update_user(self.db, user, **changes)

        self.db.refresh(user)
        logger.info(f"Profile updated for user {user_id}")
        return user

    def change_role(self, user_id: int, role: str) -> User:
        role = (role or "").strip()
        if role not in settings.roles:
            raise ValidationError(f"Role must be one of: {', '.join(settings.roles)}.")

        user = self.get_user(user_id)
        with self.transaction(failure_message="Failed to update user role."):
            crud_user.update_user(self.db, user, role=role)

        self.db.refresh(user)
        logger.info(f"Role of user {user_id} changed to {role}")
        return user

    def delete_user(self, user_id: int) -> None:
        user = self.get_user(user_id)
        if crud_user.count_orders_for_user(self.db, user_id):
            raise ConflictError("Cannot delete a user who has orders.")

        with self.transaction(
            conflict_message="Cannot delete a user who is still referenced.",
            failure_message="Failed to delete user.",
        ):
            crud_user.delete_user(self.db, user)
        logger.info(f"User {user_id} deleted")
