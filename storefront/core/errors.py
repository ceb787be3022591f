"""
Error taxonomy for the storefront.

Services raise one of the ``StorefrontError`` subclasses below. Each error
carries an ``ErrorKind`` tag and the HTTP layer translates the tag into a
status code through ``STATUS_BY_KIND``; nothing else in the code base knows
about status numbers.
"""

import enum


class ErrorKind(str, enum.Enum):
    validation = "validation"
    authentication = "authentication"
    authorization = "authorization"
    not_found = "not_found"
    conflict = "conflict"
    internal = "internal"


STATUS_BY_KIND = {
    ErrorKind.validation: 400,
    ErrorKind.authentication: 401,
    ErrorKind.authorization: 403,
    ErrorKind.not_found: 404,
    ErrorKind.conflict: 409,
    ErrorKind.internal: 500,
}


class StorefrontError(Exception):
    kind = ErrorKind.internal
    default_message = "Internal server error."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class ValidationError(StorefrontError):
    kind = ErrorKind.validation
    default_message = "Invalid input."


class AuthenticationError(StorefrontError):
    kind = ErrorKind.authentication
    default_message = "Authentication required."


class AuthorizationError(StorefrontError):
    kind = ErrorKind.authorization
    default_message = "Access denied: Insufficient privileges."


class NotFoundError(StorefrontError):
    kind = ErrorKind.not_found
    default_message = "Resource not found."


class ConflictError(StorefrontError):
    kind = ErrorKind.conflict
    default_message = "Resource conflict."


class InternalError(StorefrontError):
    kind = ErrorKind.internal


ERRORS_BY_KIND = {
    ErrorKind.validation: ValidationError,
    ErrorKind.authentication: AuthenticationError,
    ErrorKind.authorization: AuthorizationError,
    ErrorKind.not_found: NotFoundError,
    ErrorKind.conflict: ConflictError,
    ErrorKind.internal: InternalError,
}


def error_for(kind: ErrorKind, message: str = None) -> StorefrontError:
    return ERRORS_BY_KIND[kind](message)
