"""
SQLModel tables.

Importing this package registers every table on ``SQLModel.metadata``.
"""

from auth_api.models.refresh_token import RefreshTokens
from auth_api.models.user import UserBase, Users

__all__ = [
    "RefreshTokens",
    "UserBase",
    "Users",
]
