"""Exception types raised by the service and mapped to HTTP responses."""

from typing import Any, Dict, List


class UserAPIError(Exception):
    """Base class for errors that translate directly into an HTTP status."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.error)
        self.message = message or self.error

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class RequestValidationFailed(UserAPIError):
    status_code = 400
    error = "Validation failed"

    def __init__(self, details: List[Dict[str, str]]):
        super().__init__(self.error)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "details": self.details}


class Unauthorized(UserAPIError):
    status_code = 401
    error = "Unauthorized"

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "error_message": self.message}


class TokenError(Unauthorized):
    """Token is missing a field, has a bad signature or has expired."""


class InvalidCredentialsError(UserAPIError):
    status_code = 401
    error = "Invalid email or password"


class Forbidden(UserAPIError):
    status_code = 403
    error = "Forbidden"


class UserNotFoundError(UserAPIError):
    status_code = 404
    error = "User not found"


class UserAlreadyExistsError(UserAPIError):
    status_code = 409
    error = "User already exists with this email"


class HashingError(UserAPIError):
    status_code = 500
    error = "Internal server error"
