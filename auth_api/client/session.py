"""
Session client for the Auth API.

Keeps the current token pair in a TokenStorage, sends the access token as a
bearer credential, and on a 401 from a protected endpoint performs exactly one
refresh followed by one retry. A failed refresh clears the stored tokens and
the session is over (the user must log in again).
"""

from types import TracebackType
from typing import Any

import httpx
import structlog

from auth_api.client.storage import MemoryTokenStorage, TokenStorage

# Client code must not import auth_api.config (it requires server secrets)
logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """Non-success response carrying the API's structured error payload."""

    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"{status_code} {code}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        return cls(
            status_code=response.status_code,
            code=payload.get("code", "UNKNOWN"),
            message=payload.get("message", "An error occurred"),
        )


class SessionExpired(ApiError):
    """The session could not be continued; stored tokens have been cleared."""


class SessionClient:
    """
    Async client that owns one user session.

    Usage:
        async with SessionClient("http://localhost:8000") as session:
            await session.login("alice@example.com", "Password123!")
            me = await session.get_current_user()
    """

    def __init__(
        self,
        base_url: str,
        storage: TokenStorage | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        api_prefix: str = "/api",
        timeout: float = 10.0,
    ):
        self.storage: TokenStorage = storage if storage is not None else MemoryTokenStorage()
        self.api_prefix = api_prefix.rstrip("/")
        self.user: dict[str, Any] | None = None
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "SessionClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    def _auth_headers(self) -> dict[str, str]:
        token = self.storage.get_access_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _end_session(self) -> None:
        self.storage.clear()
        self.user = None

    async def _post_public(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.post(self._url(path), json=body)
        if response.is_error:
            raise ApiError.from_response(response)
        return response.json()

    async def _start_session(self, tokens: dict[str, Any]) -> dict[str, Any]:
        self.storage.store(tokens["accessToken"], tokens["refreshToken"])
        return await self.get_current_user()

    async def register(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> dict[str, Any]:
        """Create an account, store its tokens and return the user profile."""
        tokens = await self._post_public(
            "/auth/register",
            {"email": email, "password": password, "firstName": first_name, "lastName": last_name},
        )
        return await self._start_session(tokens)

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in, store the tokens and return the user profile."""
        tokens = await self._post_public("/auth/login", {"email": email, "password": password})
        return await self._start_session(tokens)

    async def refresh(self) -> None:
        """
        Rotate the stored refresh token.

        Raises:
            SessionExpired: No refresh token, or the server rejected it. The
                stored tokens are cleared; the same stale value is never retried.
        """
        refresh_token = self.storage.get_refresh_token()
        if not refresh_token:
            self._end_session()
            raise SessionExpired(401, "UNAUTHORIZED", "Not authenticated")

        try:
            tokens = await self._post_public("/auth/refresh", {"refreshToken": refresh_token})
        except ApiError as e:
            logger.info("session_refresh_failed", code=e.code)
            self._end_session()
            raise SessionExpired(e.status_code, e.code, e.message) from e

        self.storage.store(tokens["accessToken"], tokens["refreshToken"])

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Call a protected endpoint with the current access token.

        On 401 the session is refreshed once and the request retried once.

        Raises:
            SessionExpired: Refresh was impossible or rejected
            ApiError: Any other error response
        """
        headers = dict(kwargs.pop("headers", None) or {})

        response = await self._client.request(
            method, self._url(path), headers={**headers, **self._auth_headers()}, **kwargs
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            await self.refresh()
            response = await self._client.request(
                method, self._url(path), headers={**headers, **self._auth_headers()}, **kwargs
            )
            if response.status_code == httpx.codes.UNAUTHORIZED:
                self._end_session()
                raise SessionExpired.from_response(response)

        if response.is_error:
            raise ApiError.from_response(response)
        return response

    async def get_current_user(self) -> dict[str, Any]:
        """Fetch /auth/me and remember the result as the session user."""
        response = await self.request("GET", "/auth/me")
        self.user = response.json()
        return self.user

    async def change_password(self, current_password: str, new_password: str) -> None:
        """Change the password; the server revokes every session, so this one ends too."""
        await self.request(
            "POST",
            "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )
        self._end_session()

    async def logout(self) -> None:
        """Revoke refresh tokens server-side (best effort) and forget the session."""
        if self.storage.get_access_token():
            try:
                await self._client.post(self._url("/auth/logout"), headers=self._auth_headers())
            except httpx.HTTPError as e:
                logger.warning("logout_request_failed", error=str(e))
        self._end_session()

    async def restore(self) -> dict[str, Any] | None:
        """
        Restore a stored session at startup.

        If a refresh token is stored, resolve the current user (refreshing once
        if the access token is missing or expired).

        Returns:
            The user profile, or None when there is no session to restore
        """
        if not self.storage.get_refresh_token():
            self.user = None
            return None
        try:
            return await self.get_current_user()
        except SessionExpired:
            return None
