from .user import PUBLIC_COLUMNS, User

__all__ = ["PUBLIC_COLUMNS", "User"]
