"""User management API with cookie-based JWT authentication."""

from .api import app

__all__ = ["app"]
