import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..auth import get_db
from ..auth_service import authenticate_user, create_user
from ..config import settings
from ..schemas import MessageResponse, UserCreate, UserLogin, UserResponse
from ..security import Identity, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_token_cookie(response: Response, user: dict) -> None:
    token = create_access_token(
        Identity(id=user["id"], email=user["email"], role=user["role"])
    )
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.access_token_expire_minutes * 60,
    )


@router.post("/sign-up", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def sign_up(payload: UserCreate, response: Response, db: Session = Depends(get_db)):
    user = create_user(
        db, name=payload.name, email=payload.email, password=payload.password
    )
    _set_token_cookie(response, user)
    logger.info("user registered successfully: %s", user["email"])
    return {"message": "User registered", "user": user}


@router.post("/sign-in", response_model=UserResponse)
def sign_in(payload: UserLogin, response: Response, db: Session = Depends(get_db)):
    user = authenticate_user(db, email=payload.email, password=payload.password)
    _set_token_cookie(response, user)
    logger.info("user signed in successfully: %s", user["email"])
    return {"message": "User signed in successfully", "user": user}


@router.post("/sign-out", response_model=MessageResponse)
def sign_out(response: Response):
    response.delete_cookie(
        key=settings.auth_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return {"message": "User signed out successfully"}
