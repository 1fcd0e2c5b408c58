"""
Refresh token storage.

A pure storage primitive: it creates, consumes and revokes opaque refresh
tokens but never issues access tokens or rotates on its own. It flushes its
changes; the caller owns the transaction and commits.

Single use is decided by the database: ``consume`` deletes the row by its
hash and only the statement that actually removed it (rowcount == 1) wins,
so two concurrent refreshes with the same value yield one success.
"""

from datetime import datetime, timedelta

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from auth_api.core.errors import InvalidOrExpired
from auth_api.core.logging import get_logger
from auth_api.core.security import create_refresh_token, hash_refresh_token
from auth_api.models.refresh_token import RefreshTokens
from auth_api.utils import as_utc, expires_at, is_expired, utc_now

logger = get_logger(__name__)

# Anything longer cannot be a token we issued
MAX_TOKEN_LENGTH = 512


class RefreshTokenStore:
    """Persists hashed refresh tokens with an absolute expiry."""

    def __init__(self, db: AsyncSession, ttl: timedelta):
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self.db = db
        self.ttl = ttl

    async def create(self, user_id: str) -> str:
        """
        Create a refresh token for a user.

        Returns:
            The raw token value. It is returned exactly once; only its hash is stored.
        """
        raw_token = create_refresh_token()
        db_token = RefreshTokens(
            token_hash=hash_refresh_token(raw_token),
            user_id=user_id,
            expires_at=expires_at(self.ttl),
        )
        self.db.add(db_token)
        await self.db.flush()

        logger.debug("refresh_token_created", user_id=user_id, expires_at=db_token.expires_at)
        return raw_token

    async def consume(self, raw_token: str) -> str:
        """
        Use up a refresh token.

        Returns:
            ID of the user that owned the token

        Raises:
            InvalidOrExpired: Unknown, already used, malformed or expired token
        """
        if not raw_token or len(raw_token) > MAX_TOKEN_LENGTH:
            logger.info("refresh_token_rejected", reason="malformed")
            raise InvalidOrExpired()

        token_hash = hash_refresh_token(raw_token)

        result = await self.db.execute(
            select(RefreshTokens.user_id, RefreshTokens.expires_at).where(  # type: ignore[call-overload]
                RefreshTokens.token_hash == token_hash
            )
        )
        row = result.one_or_none()
        if row is None:
            logger.info("refresh_token_rejected", reason="unknown")
            raise InvalidOrExpired()

        user_id, expiry = row

        # Check-and-delete in one statement; an expired row is purged as well
        deleted = await self.db.execute(
            delete(RefreshTokens).where(RefreshTokens.token_hash == token_hash)  # type: ignore[arg-type]
        )
        if deleted.rowcount != 1:
            logger.warning("refresh_token_rejected", reason="already_consumed", user_id=user_id)
            raise InvalidOrExpired()

        if is_expired(expiry):
            logger.info("refresh_token_rejected", reason="expired", user_id=user_id)
            raise InvalidOrExpired()

        return user_id

    async def revoke_all(self, user_id: str) -> int:
        """
        Delete every refresh token owned by a user.

        Returns:
            Number of tokens revoked
        """
        result = await self.db.execute(
            delete(RefreshTokens).where(RefreshTokens.user_id == user_id)  # type: ignore[arg-type]
        )
        revoked = result.rowcount or 0
        logger.info("refresh_tokens_revoked", user_id=user_id, count=revoked)
        return revoked

    async def purge_expired(self, now: datetime | None = None) -> int:
        """
        Delete all expired refresh tokens (housekeeping sweep).

        Returns:
            Number of tokens deleted
        """
        result = await self.db.execute(
            delete(RefreshTokens).where(RefreshTokens.expires_at <= as_utc(now or utc_now()))  # type: ignore[arg-type]
        )
        return result.rowcount or 0

    async def count_for_user(self, user_id: str) -> int:
        """Number of refresh tokens currently stored for a user."""
        result = await self.db.execute(
            select(func.count()).select_from(RefreshTokens).where(RefreshTokens.user_id == user_id)  # type: ignore[arg-type]
        )
        return int(result.scalar_one())
