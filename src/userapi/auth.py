import logging
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from .config import settings
from .database import SessionLocal
from .errors import Forbidden, Unauthorized
from .schemas import UserUpdate
from .security import Identity, decode_access_token

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """Provide a session scoped to a single request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_auth(request: Request) -> Identity:
    """Verify the token cookie and attach the caller to ``request.state.user``."""
    token = request.cookies.get(settings.auth_cookie_name)
    try:
        if not token:
            raise Unauthorized("No access token provided")
        identity = decode_access_token(token)
    except Unauthorized:
        logger.warning(
            "invalid or missing auth token path=%s method=%s",
            request.url.path,
            request.method,
        )
        raise

    request.state.user = identity
    return identity


def verify_user(user_id: int, current_user: Optional[Identity]) -> Identity:
    """Allow the caller to act on ``user_id`` only as that user or as an admin."""
    if current_user is None:
        raise Unauthorized()
    if current_user.id != user_id and not current_user.is_admin:
        raise Forbidden()
    return current_user


def verify_update(user_id: int, patch: UserUpdate, current_user: Optional[Identity]) -> Identity:
    """Self-or-admin check plus the admin-only ``role`` field."""
    current_user = verify_user(user_id, current_user)
    if patch.changes_role and not current_user.is_admin:
        raise Forbidden("Forbidden: only admin can change role")
    return current_user
