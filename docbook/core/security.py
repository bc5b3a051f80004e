from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from pydantic import BaseModel
from enum import Enum

from .config import settings
from .exceptions import AuthenticationError, AuthorizationError

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# Bearer extraction; missing headers are reported by get_auth_context
security = HTTPBearer(auto_error=False)


class UserRole(str, Enum):
    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"


class TokenPayload(BaseModel):
    userId: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    exp: Optional[int] = None


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller of a request."""
    user_id: str
    email: str
    role: UserRole


def ensure_owner(
    owner_id: Optional[str],
    actor: AuthContext,
    detail: str = "You can only access your own resources"
) -> None:
    """Reject access to a resource owned by someone other than the actor."""
    if owner_id is None or owner_id != actor.user_id:
        raise AuthorizationError(detail)


# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)


# JWT utilities
def create_access_token(
    user_id: str,
    email: str,
    role: UserRole,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed access token carrying userId, email and role."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode = {
        "userId": user_id,
        "email": email,
        "role": UserRole(role).value,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def verify_token(token: str) -> AuthContext:
    """Decode a bearer token into an AuthContext.

    The signature is validated by jose; expiry is checked here so that an
    expired token is reported separately from an invalid one.
    """
    if not token:
        raise AuthenticationError("Please Login First")

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": False},
        )
        token_payload = TokenPayload(**payload)
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except (JWTError, ValueError):
        raise AuthenticationError("Invalid token")

    if not token_payload.userId or not token_payload.email or not token_payload.role:
        raise AuthenticationError("Invalid token")

    if token_payload.exp is not None and datetime.now(timezone.utc).timestamp() >= token_payload.exp:
        raise AuthenticationError("Token has expired")

    try:
        role = UserRole(token_payload.role)
    except ValueError:
        raise AuthenticationError("Invalid token")

    return AuthContext(
        user_id=token_payload.userId,
        email=token_payload.email,
        role=role,
    )
