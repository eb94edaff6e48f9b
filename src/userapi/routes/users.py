import logging

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.orm import Session

from .. import services
from ..auth import ensure_auth, get_db, verify_update, verify_user
from ..errors import UserNotFoundError
from ..schemas import MessageResponse, UserListResponse, UserResponse, UserUpdate
from ..security import Identity

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=UserListResponse)
def fetch_all_users(db: Session = Depends(get_db)):
    """Return every user with a count."""
    logger.info("getting users")
    users = services.get_all_users(db)
    return {
        "message": "Successfully retrieved users",
        "users": users,
        "count": len(users),
    }


@router.get("/{user_id}", response_model=UserResponse)
def get_user_by_id(user_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    logger.info("getting user by id: %s", user_id)
    user = services.get_user_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError()
    return {"message": "Successfully retrieved user", "user": user}


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    request: Request,
    payload: UserUpdate,
    user_id: int = Path(..., gt=0),
    _: Identity = Depends(ensure_auth),
    db: Session = Depends(get_db),
):
    """Update a user as that user or as an admin; ``role`` is admin-only."""
    current_user = verify_update(user_id, payload, getattr(request.state, "user", None))

    # Never log the payload, it may carry a password.
    logger.info("updating user %s%s", user_id, " by admin" if current_user.is_admin else "")
    updated = services.update_user(db, user_id, payload.changes())
    if updated is None:
        raise UserNotFoundError()
    return {"message": "User updated successfully", "user": updated}


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    request: Request,
    user_id: int = Path(..., gt=0),
    _: Identity = Depends(ensure_auth),
    db: Session = Depends(get_db),
):
    current_user = verify_user(user_id, getattr(request.state, "user", None))

    logger.info("deleting user %s%s", user_id, " by admin" if current_user.is_admin else "")
    if services.delete_user(db, user_id) is None:
        raise UserNotFoundError()
    return {"message": "User deleted successfully"}
