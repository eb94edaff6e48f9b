"""Pydantic schemas for request validation and response serialization."""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

Role = Literal["user", "admin"]

# Updatable columns; anything else in a payload is dropped.
UPDATABLE_FIELDS = ("name", "email", "role", "password")

_LOCATION_PREFIXES = {"path", "body", "query", "cookie", "header"}


class UserCreate(BaseModel):
    """Request body for registering a new user. Public sign-up never grants admin."""

    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower().strip()


class UserLogin(BaseModel):
    """Request body for user login."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower().strip()


class UserUpdate(BaseModel):
    """Partial update of a user. Only fields that are sent are applied."""

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)

    # Fields may be omitted but not sent as null; role is left to the policy.
    @field_validator("name", "email", "password", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field may be omitted but must not be null")
        return value

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower().strip() if value is not None else value

    @model_validator(mode="after")
    def _require_a_field(self) -> "UserUpdate":
        if not self.model_fields_set & set(UPDATABLE_FIELDS):
            raise ValueError("At least one field must be provided for update")
        return self

    @property
    def changes_role(self) -> bool:
        return "role" in self.model_fields_set

    def changes(self) -> Dict[str, Any]:
        """Return the allow-listed fields that carry a value."""
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        return {key: data[key] for key in UPDATABLE_FIELDS if key in data}


class UserOut(BaseModel):
    """Serialized user record, never including the password hash."""

    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


class UserResponse(MessageResponse):
    user: UserOut


class UserListResponse(MessageResponse):
    users: List[UserOut]
    count: int


def format_validation_error(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error entries into ``{field, message}`` pairs."""
    details = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        details.append({"field": ".".join(loc) or "body", "message": error.get("msg", "")})
    return details
