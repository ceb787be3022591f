from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from storefront.core.config import settings
from storefront.core.errors import AuthenticationError

# Create hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Identity:
    """Caller identity decoded from a verified access token."""
    id: int
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == settings.ADMIN_ROLE


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed token for a user row (or Identity).

    Payload shape: ``{iat, exp, user: {id, email, first_name, last_name, role}}``.
    """
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "iat": issued_at,
        "exp": expire,
        "user": {
            "id": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "role": user.role,
        },
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: Optional[str]) -> Identity:
    if not token:
        raise AuthenticationError("Missing authorization token.")

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired. Please log in again.")
    except JWTError:
        raise AuthenticationError("Invalid token.")

    user = payload.get("user")
    if not isinstance(user, dict) or not user.get("role") or user.get("id") is None:
        raise AuthenticationError("Invalid token: user data or role missing in token payload.")

    try:
        return Identity(
            id=int(user["id"]),
            email=user.get("email"),
            role=user["role"],
            first_name=user.get("first_name"),
            last_name=user.get("last_name"),
        )
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token: malformed user claims.")
