"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Building the token codec and auth service from settings
- Extracting and verifying bearer access tokens
- Loading the current user from the database
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth_api.config import settings
from auth_api.core.database import get_db
from auth_api.core.errors import TokenError, Unauthorized
from auth_api.core.logging import get_logger, set_user_context
from auth_api.core.tokens import TokenClaims, TokenCodec
from auth_api.models.user import Users
from auth_api.services.auth import AuthService

logger = get_logger(__name__)

# Define the security scheme for OpenAPI documentation
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide codec built once from settings."""
    return TokenCodec(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        ttl=timedelta(milliseconds=settings.ACCESS_TOKEN_EXPIRE_MS),
    )


def get_refresh_ttl() -> timedelta:
    return timedelta(milliseconds=settings.REFRESH_TOKEN_EXPIRE_MS)


def get_auth_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    refresh_ttl: Annotated[timedelta, Depends(get_refresh_ttl)],
) -> AuthService:
    return AuthService(db, codec, refresh_ttl)


async def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> TokenClaims:
    """
    Extract and verify the bearer access token.

    Missing, malformed, tampered and expired tokens all end up as the same
    Unauthorized response; the specific reason is only logged.

    Raises:
        Unauthorized: 401 if token is missing, invalid, or expired
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Not authenticated")

    try:
        claims = codec.verify(credentials.credentials)
    except TokenError as e:
        logger.info("access_token_rejected", reason=e.reason)
        raise Unauthorized() from e

    set_user_context(claims.user_id)
    return claims


async def get_current_user(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> Users:
    """
    Load current user from database using verified token.

    Raises:
        NotFound: 404 if the token subject no longer exists
        Unauthorized: 401 if the account has been disabled
    """
    user = await service.get_current_user(claims.user_id)
    if not user.enabled:
        raise Unauthorized("User account is disabled")
    return user


# Type aliases for dependency injection
CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]
CurrentUser = Annotated[Users, Depends(get_current_user)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
