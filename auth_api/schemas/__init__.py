"""
Pydantic schemas for API responses and requests
"""
from auth_api.models.user import UserBase  # Re-export from models
from auth_api.schemas.auth import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    PasswordChangeRequest,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
)

__all__ = [
    "UserBase",
    # Auth schemas
    "AuthResponse",
    "ErrorResponse",
    "LoginRequest",
    "PasswordChangeRequest",
    "RefreshRequest",
    "RegisterRequest",
    "UserResponse",
]
