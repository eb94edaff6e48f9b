"""Password hashing and JWT helpers."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from .config import settings
from .errors import HashingError, TokenError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)


@dataclass(frozen=True)
class Identity:
    """Caller identity decoded from a verified access token."""

    id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except (TypeError, ValueError) as exc:
        logger.error("hash password error: %s", type(exc).__name__)
        raise HashingError("Hash password failed") from exc


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash.

    A hash passlib cannot identify is treated as a mismatch.
    """
    try:
        return pwd_context.verify(password, hashed_password)
    except (TypeError, ValueError):
        logger.warning("stored password hash could not be verified")
        return False


def create_access_token(identity: Identity, expires: timedelta | None = None) -> str:
    """Sign a token carrying the caller's id, email and role."""
    now = datetime.now(timezone.utc)
    expires = expires or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "id": identity.id,
        "email": identity.email,
        "role": identity.role,
        "iat": now,
        "exp": now + expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Identity:
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("Token has expired") from exc
    except jwt.PyJWTError as exc:
        raise TokenError("Invalid token") from exc

    try:
        return Identity(
            id=int(payload["id"]), email=str(payload["email"]), role=str(payload["role"])
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise TokenError("Invalid token payload") from exc
