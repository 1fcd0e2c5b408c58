"""
SQLModel-based RefreshToken model for JWT authentication.

Security features:
- Stores hashed tokens (not plaintext)
- Single-use: a row is deleted when it is consumed (rotation)
- Absolute expiry checked on every use, swept periodically
"""

from datetime import datetime

from sqlalchemy import ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from auth_api.utils import utc_now


class RefreshTokens(SQLModel, table=True):
    """
    Database table for refresh tokens.

    Each row is one active session-continuation credential, exclusively owned
    by a user. Rows are removed on rotation, logout, account disable, password
    change, expiry on access, or by the expiry sweep.
    """

    __tablename__ = "refresh_tokens"

    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
            name="fk_refresh_tokens_user_id",
        ),
        Index("idx_refresh_tokens_user_id", "user_id"),
        Index("idx_refresh_tokens_expires_at", "expires_at"),
    )

    # SHA-256 hex of the opaque token value (never store plaintext!)
    token_hash: str = Field(primary_key=True, max_length=64)

    # Owning user
    user_id: str = Field(max_length=36)

    # Expiration (UTC)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
