"""Persistence layer for user records.

Every read projects away the password hash. Updates and deletes are single
conditional statements, so absence is reported by the affected rows rather
than by a separate lookup.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import UserAlreadyExistsError
from .models.user import PUBLIC_COLUMNS, User
from .security import hash_password

logger = logging.getLogger(__name__)


def _handle_service_error(session: Session, exc: Exception, action: str) -> None:
    """Rollback the transaction and translate integrity violations."""
    session.rollback()
    if isinstance(exc, IntegrityError):
        logger.warning("%s rejected by constraint", action)
        raise UserAlreadyExistsError() from exc
    logger.exception("error %s", action)
    raise exc


def get_all_users(session: Session) -> List[Dict[str, Any]]:
    """Return every user without the password column."""
    try:
        rows = session.execute(select(*PUBLIC_COLUMNS).order_by(User.id)).all()
    except SQLAlchemyError as exc:
        _handle_service_error(session, exc, "getting users")
    return [dict(row._mapping) for row in rows]


def get_user_by_id(session: Session, user_id: int) -> Optional[Dict[str, Any]]:
    try:
        row = session.execute(
            select(*PUBLIC_COLUMNS).where(User.id == user_id).limit(1)
        ).first()
    except SQLAlchemyError as exc:
        _handle_service_error(session, exc, "getting user by id")
    return dict(row._mapping) if row else None


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    """Return the full entity, password hash included, for authentication."""
    try:
        return session.execute(
            select(User).where(User.email == email).limit(1)
        ).scalar_one_or_none()
    except SQLAlchemyError as exc:
        _handle_service_error(session, exc, "getting user by email")


def update_user(
    session: Session, user_id: int, changes: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Apply an allow-listed patch to a user.

    Returns the updated record, or ``None`` when no row has ``user_id``.
    A password in ``changes`` is hashed before it is written.
    """
    values = {key: changes[key] for key in ("name", "email", "role") if key in changes}
    if "password" in changes:
        values["password"] = hash_password(changes["password"])

    try:
        if values:
            result = session.execute(
                update(User)
                .where(User.id == user_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                session.rollback()
                return None
        session.commit()
    except SQLAlchemyError as exc:
        _handle_service_error(session, exc, "updating user")

    updated = get_user_by_id(session, user_id)
    if updated is not None:
        logger.info("user %s updated successfully", user_id)
    return updated


def delete_user(session: Session, user_id: int) -> Optional[Dict[str, Any]]:
    """Delete a user and return its ``id``/``email``, or ``None`` if absent."""
    try:
        row = session.execute(
            delete(User)
            .where(User.id == user_id)
            .returning(User.id, User.email)
            .execution_options(synchronize_session=False)
        ).first()
        session.commit()
    except SQLAlchemyError as exc:
        _handle_service_error(session, exc, "deleting user")

    if row is None:
        return None
    logger.info("user %s deleted successfully", row.id)
    return dict(row._mapping)
