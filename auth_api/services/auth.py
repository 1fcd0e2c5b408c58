"""
Authentication service: register, login, refresh, logout.

There is no session entity. A client is authenticated while it holds a valid
access token and can continue while it holds an unconsumed refresh token;
every state transition below is a change to those two facts.

Each operation runs as one unit of work: the access token and the refresh
token are either both issued and committed, or the operation fails and the
session is rolled back.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth_api.config import Role
from auth_api.core.errors import (
    AlreadyExists,
    InvalidOrExpired,
    NotFound,
    ValidationFailed,
)
from auth_api.core.logging import get_logger
from auth_api.core.security import get_password_hash, normalize_email, verify_password
from auth_api.core.tokens import SubjectClaims, TokenCodec
from auth_api.models.user import Users
from auth_api.services.credentials import CredentialVerifier, get_user_by_email
from auth_api.services.refresh_tokens import RefreshTokenStore
from auth_api.utils import utc_now

logger = get_logger(__name__)

EMAIL_MAX_LENGTH = 255
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 255


@dataclass(frozen=True)
class AuthResult:
    """Token pair handed to the client after register/login/refresh."""

    access_token: str
    refresh_token: str
    expires_in: int  # access token lifetime in milliseconds


def _require(value: str | None, field: str, max_length: int, min_length: int = 1) -> str:
    """Reject empty or oversized input that slipped past the API schemas."""
    if value is None or not value.strip():
        raise ValidationFailed(f"{field} must not be empty")
    if len(value) < min_length:
        raise ValidationFailed(f"{field} must be at least {min_length} characters")
    if len(value) > max_length:
        raise ValidationFailed(f"{field} must be at most {max_length} characters")
    return value


class AuthService:
    """Orchestrates credential checks, token issuance and refresh token rotation."""

    def __init__(self, db: AsyncSession, codec: TokenCodec, refresh_ttl: timedelta):
        self.db = db
        self.codec = codec
        self.verifier = CredentialVerifier(db)
        self.store = RefreshTokenStore(db, refresh_ttl)

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncIterator[None]:
        try:
            yield
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def _issue_tokens(self, user: Users) -> AuthResult:
        access_token = self.codec.issue(
            SubjectClaims(user_id=user.id, email=user.email, role=user.role)
        )
        refresh_token = await self.store.create(user.id)
        return AuthResult(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.codec.ttl_ms,
        )

    async def register(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> AuthResult:
        """
        Create a USER account and sign it in.

        Raises:
            ValidationFailed: Empty or oversized field
            AlreadyExists: Email already registered (case-insensitive)
        """
        email = normalize_email(_require(email, "email", EMAIL_MAX_LENGTH))
        _require(password, "password", PASSWORD_MAX_LENGTH, min_length=PASSWORD_MIN_LENGTH)
        first_name = _require(first_name, "firstName", NAME_MAX_LENGTH).strip()
        last_name = _require(last_name, "lastName", NAME_MAX_LENGTH).strip()

        async with self._unit_of_work():
            if await get_user_by_email(self.db, email) is not None:
                logger.info("registration_rejected", reason="email_taken")
                raise AlreadyExists()

            user = Users(
                email=email,
                password=get_password_hash(password),
                first_name=first_name,
                last_name=last_name,
                role=Role.USER,
                enabled=True,
            )
            self.db.add(user)
            try:
                await self.db.flush()
            except IntegrityError as e:
                # Lost the race against a concurrent registration
                logger.info("registration_rejected", reason="email_taken_concurrently")
                raise AlreadyExists() from e

            result = await self._issue_tokens(user)

        logger.info("user_registered", user_id=user.id)
        return result

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate and start a new session.

        Prior refresh tokens stay valid: concurrent sessions are allowed.

        Raises:
            InvalidCredentials: Unknown email or wrong password
            AccountDisabled: Account deactivated
        """
        async with self._unit_of_work():
            user = await self.verifier.verify(email, password)
            result = await self._issue_tokens(user)

        logger.info("user_logged_in", user_id=user.id)
        return result

    async def refresh(self, refresh_token: str) -> AuthResult:
        """
        Rotate a refresh token: consume it and issue a new pair.

        Raises:
            InvalidOrExpired: Unknown, reused, malformed or expired token, or
                the owner can no longer sign in
        """
        async with self._unit_of_work():
            try:
                user_id = await self.store.consume(refresh_token)
            except InvalidOrExpired:
                # Keep the purge of an expired token
                await self.db.commit()
                raise

            user = await self.db.get(Users, user_id)
            if user is None or not user.enabled:
                logger.info("refresh_rejected", reason="user_unavailable", user_id=user_id)
                await self.db.commit()
                raise InvalidOrExpired()

            result = await self._issue_tokens(user)

        logger.info("token_refreshed", user_id=user.id)
        return result

    async def logout(self, user_id: str) -> int:
        """
        Revoke every refresh token of a user.

        Outstanding access tokens stay valid until they expire.

        Returns:
            Number of refresh tokens revoked
        """
        async with self._unit_of_work():
            revoked = await self.store.revoke_all(user_id)

        logger.info("user_logged_out", user_id=user_id, revoked=revoked)
        return revoked

    async def get_current_user(self, user_id: str) -> Users:
        """
        Resolve the subject of a verified access token.

        Raises:
            NotFound: No such user
        """
        user = await self.db.get(Users, user_id)
        if user is None:
            raise NotFound()
        return user

    async def set_enabled(self, user_id: str, enabled: bool) -> Users:
        """
        Enable or disable an account.

        Disabling revokes all refresh tokens so existing sessions cannot be
        continued past their current access token.

        Raises:
            NotFound: No such user
        """
        async with self._unit_of_work():
            user = await self.get_current_user(user_id)
            user.enabled = enabled
            user.updated_at = utc_now()
            if not enabled:
                await self.store.revoke_all(user_id)

        logger.info("user_enabled_changed", user_id=user_id, enabled=enabled)
        return user

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        """
        Change a password and sign out every session.

        Raises:
            NotFound: No such user
            ValidationFailed: Current password is wrong, or new password empty,
                too short or too long
        """
        _require(new_password, "newPassword", PASSWORD_MAX_LENGTH, min_length=PASSWORD_MIN_LENGTH)

        async with self._unit_of_work():
            user = await self.get_current_user(user_id)
            if not verify_password(current_password, user.password):
                logger.info("password_change_rejected", reason="bad_password", user_id=user_id)
                raise ValidationFailed("Current password is incorrect")

            user.password = get_password_hash(new_password)
            user.updated_at = utc_now()
            await self.store.revoke_all(user_id)

        logger.info("password_changed", user_id=user_id)
