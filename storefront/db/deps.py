from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from storefront.core.authz import Action, enforce
from storefront.core.security import Identity, decode_access_token
from storefront.db.session import SessionLocal

# auto_error is off so a missing token surfaces as our 401 envelope
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

# Header name used by the legacy frontend
LEGACY_AUTH_HEADER = "Authentication"


# Dependency to get DB
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _legacy_token(request: Request) -> Optional[str]:
    value = request.headers.get(LEGACY_AUTH_HEADER)
    if not value:
        return None
    scheme, _, token = value.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


# Dependency to get the caller identity from the bearer token
def get_current_identity(request: Request, token: Optional[str] = Depends(oauth2_scheme)) -> Identity:
    return decode_access_token(token or _legacy_token(request))


def require(action: Action):
    """Dependency factory for actions whose rule needs no resource owner."""

    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        enforce(identity, action)
        return identity

    return dependency
