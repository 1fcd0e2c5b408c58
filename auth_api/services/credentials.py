"""Email/password credential verification."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auth_api.core.errors import AccountDisabled, InvalidCredentials
from auth_api.core.logging import get_logger
from auth_api.core.security import DUMMY_PASSWORD_HASH, normalize_email, verify_password
from auth_api.models.user import Users

logger = get_logger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> Users | None:
    """Case-insensitive user lookup (emails are stored normalized)."""
    result = await db.execute(select(Users).where(Users.email == normalize_email(email)))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


class CredentialVerifier:
    """Checks a presented email/password pair against the stored bcrypt hash."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def verify(self, email: str, password: str) -> Users:
        """
        Verify credentials without side effects.

        Unknown email and wrong password raise the same InvalidCredentials so
        callers cannot tell which emails are registered. An unknown email is
        still checked against a dummy hash to keep response times alike.

        Raises:
            InvalidCredentials: Unknown email or wrong password
            AccountDisabled: Correct password for a disabled account
        """
        user = await get_user_by_email(self.db, email)

        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentials()

        if not verify_password(password, user.password):
            logger.info("login_failed", reason="bad_password", user_id=user.id)
            raise InvalidCredentials()

        if not user.enabled:
            logger.info("login_failed", reason="account_disabled", user_id=user.id)
            raise AccountDisabled()

        return user
