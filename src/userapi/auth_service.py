"""Registration and credential checks."""

import logging
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import InvalidCredentialsError, UserAlreadyExistsError
from .models.user import User
from .security import hash_password, verify_password
from .services import get_user_by_email

logger = logging.getLogger(__name__)

# Verified against when the email is unknown so both failure paths cost a hash.
_DUMMY_HASH = hash_password("not-a-real-password")


def _public(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def create_user(
    session: Session, name: str, email: str, password: str, role: str = "user"
) -> Dict[str, Any]:
    """Insert a new user with a hashed password."""
    existing = session.execute(
        select(User.id).where(User.email == email).limit(1)
    ).first()
    if existing is not None:
        raise UserAlreadyExistsError()

    db_user = User(name=name, email=email, password=hash_password(password), role=role)
    session.add(db_user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise UserAlreadyExistsError() from exc
    except SQLAlchemyError:
        session.rollback()
        logger.exception("error creating user")
        raise
    session.refresh(db_user)

    logger.info("user %s created successfully", db_user.email)
    return _public(db_user)


def authenticate_user(session: Session, email: str, password: str) -> Dict[str, Any]:
    """Return the user when the credentials match.

    Unknown email and wrong password raise the same error.
    """
    user = get_user_by_email(session, email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("authentication failed")
        raise InvalidCredentialsError()

    if not verify_password(password, user.password):
        logger.info("authentication failed")
        raise InvalidCredentialsError()

    logger.info("user %s authenticated successfully", user.email)
    return _public(user)
