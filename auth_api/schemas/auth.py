"""
Authentication schemas for request/response validation.

This module defines Pydantic models for authentication-related API operations.
JSON bodies use camelCase (``firstName``, ``refreshToken``, ``expiresIn``);
Python code uses snake_case.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    return v


class RegisterRequest(CamelModel):
    """Request schema for user registration."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("password", "first_name", "last_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=255)  # Any length for existing users


class RefreshRequest(CamelModel):
    """Request schema for token refresh."""

    refresh_token: str = Field(..., min_length=1, max_length=512)

    @field_validator("refresh_token")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class PasswordChangeRequest(CamelModel):
    """Request schema for password change."""

    current_password: str = Field(..., min_length=1, max_length=255)
    new_password: str = Field(..., min_length=8, max_length=255)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return _not_blank(v)


class AuthResponse(CamelModel):
    """Response schema for successful register/login/refresh."""

    access_token: str
    refresh_token: str
    expires_in: int = Field(..., description="Access token lifetime in milliseconds")


class UserResponse(CamelModel):
    """Public profile of the authenticated user."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: str


class ErrorResponse(BaseModel):
    """Structured error payload returned for every failure."""

    code: str
    message: str
