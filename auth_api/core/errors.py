"""
Authentication error taxonomy.

Every failure the auth core can produce is one of these typed exceptions.
The API layer turns them into a structured ``{"code", "message"}`` payload
with the matching HTTP status (see ``auth_api.main``).

Token-level failures (``TokenInvalid``/``TokenExpired``) stay distinguishable
for logging but are collapsed into ``Unauthorized`` at the request boundary.
"""

from fastapi import status


class AuthError(Exception):
    """Base class for all recoverable authentication failures."""

    code: str = "AUTH_ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class ValidationFailed(AuthError):
    code = "VALIDATION_FAILED"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request validation failed"


class AlreadyExists(AuthError):
    code = "ALREADY_EXISTS"
    status_code = status.HTTP_409_CONFLICT
    default_message = "An account with this email already exists"


class InvalidCredentials(AuthError):
    code = "INVALID_CREDENTIALS"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Incorrect email or password"


class AccountDisabled(AuthError):
    code = "ACCOUNT_DISABLED"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "This account has been disabled"


class InvalidOrExpired(AuthError):
    code = "INVALID_OR_EXPIRED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Refresh token is invalid or expired"


class Unauthorized(AuthError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class NotFound(AuthError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class TokenError(Exception):
    """Access token could not be verified."""

    reason = "invalid"


class TokenInvalid(TokenError):
    """Malformed token, signature mismatch, or missing/wrong claims."""

    reason = "invalid"


class TokenExpired(TokenError):
    """Well-formed, correctly signed token whose ``exp`` has passed."""

    reason = "expired"
