import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.errors import ConflictError, InternalError, StorefrontError

logger = logging.getLogger(__name__)


class BaseService:
    """Holds the request's session and owns the transaction boundary.

    Data-access functions only flush; services commit once per operation
    through ``transaction`` so a failure half way leaves nothing behind.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self, conflict_message: str = "Resource conflict.", failure_message: str = "Operation failed."):
        try:
            yield
            self.db.commit()
        except StorefrontError:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Integrity violation: {e.orig}")
            raise ConflictError(conflict_message)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(failure_message)
            raise InternalError(failure_message)

    @contextmanager
    def reading(self, failure_message: str = "Failed to read data."):
        try:
            yield
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(failure_message)
            raise InternalError(failure_message)
