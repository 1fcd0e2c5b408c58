"""
SQLModel-based User models with inheritance for security

UserBase (shared public fields)
    ├─> Users (database table, adds password hash and account state)
    └─> UserResponse (API schema, defined in auth_api/schemas)
"""

import uuid
from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from auth_api.config import Role
from auth_api.utils import utc_now


class UserBase(SQLModel):
    """
    Base model with shared public fields for Users.

    These fields are safe to expose via the API.
    """

    # Always stored normalized (stripped, lower-cased), see core.security.normalize_email
    email: str = Field(max_length=255)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    role: str = Field(default=Role.USER, max_length=20)


class Users(UserBase, table=True):
    """
    Database table for users.

    Internal/sensitive fields (should NOT be exposed via public API):
    - password: bcrypt hash (never the plaintext)
    - enabled: Access control; disabled accounts cannot log in or refresh
    """

    __tablename__ = "users"

    # Unique index on the normalized email closes the register check-then-insert race
    __table_args__ = (Index("uq_users_email", "email", unique=True),)

    # Primary key (opaque identifier)
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True, max_length=36)

    # Authentication (highly sensitive - never expose)
    password: str = Field(max_length=255)

    # Account state
    enabled: bool = Field(default=True)

    # Timestamps (UTC)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
