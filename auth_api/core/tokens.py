"""
Signed access token codec (JWT).

The codec is constructed with its signing key and TTL instead of reading
global settings, so tests and key rotation can use independent instances.
Access tokens are never persisted: validity is signature + expiry only.
"""

from datetime import UTC, datetime, timedelta

import jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from auth_api.core.errors import TokenExpired, TokenInvalid

ACCESS_TOKEN_TYPE = "access"


class SubjectClaims(BaseModel):
    """Identity embedded in a new access token."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    role: str


class TokenClaims(BaseModel):
    """Claims recovered from a verified access token."""

    model_config = ConfigDict(frozen=True)

    sub: str
    email: str
    role: str
    iat: datetime
    exp: datetime

    @property
    def user_id(self) -> str:
        return self.sub


class TokenCodec:
    """Issues and verifies HMAC-signed access tokens."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl = ttl

    @property
    def ttl_ms(self) -> int:
        """Configured access token lifetime in milliseconds."""
        return int(self.ttl.total_seconds() * 1000)

    def issue(self, subject: SubjectClaims, ttl: timedelta | None = None) -> str:
        """
        Create a signed access token for a subject.

        Args:
            subject: User identity and role to embed
            ttl: Optional lifetime override (defaults to the codec TTL)

        Returns:
            Encoded JWT string
        """
        issued_at = datetime.now(UTC)
        payload = {
            "sub": subject.user_id,  # "sub" (subject) is standard JWT claim
            "email": subject.email,
            "role": subject.role,
            "type": ACCESS_TOKEN_TYPE,  # Custom claim to distinguish token types
            "iat": issued_at,
            "exp": issued_at + (ttl if ttl is not None else self.ttl),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry of an access token.

        Args:
            token: Encoded JWT string

        Returns:
            The verified claims

        Raises:
            TokenExpired: Signature is valid but the token has expired
            TokenInvalid: Malformed token, bad signature, or missing/wrong claims
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "require": ["sub", "exp", "iat"],
                },
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("Access token has expired") from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalid(f"Invalid access token: {e}") from e

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise TokenInvalid("Invalid access token: wrong token type")

        try:
            return TokenClaims(
                sub=payload["sub"],
                email=payload.get("email"),
                role=payload.get("role"),
                iat=datetime.fromtimestamp(payload["iat"], tz=UTC),
                exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
            )
        except (ValidationError, TypeError, ValueError) as e:
            raise TokenInvalid("Invalid access token: malformed claims") from e
