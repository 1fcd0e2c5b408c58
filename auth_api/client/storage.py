"""Client-side token storage backends for SessionClient."""

import json
from pathlib import Path
from typing import Protocol

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


class TokenStorage(Protocol):
    """Where a SessionClient keeps its current token pair."""

    def get_access_token(self) -> str | None: ...

    def get_refresh_token(self) -> str | None: ...

    def store(self, access_token: str, refresh_token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStorage:
    """Tokens held for the lifetime of the process."""

    def __init__(self) -> None:
        self._tokens: dict[str, str] = {}

    def get_access_token(self) -> str | None:
        return self._tokens.get(ACCESS_TOKEN_KEY)

    def get_refresh_token(self) -> str | None:
        return self._tokens.get(REFRESH_TOKEN_KEY)

    def store(self, access_token: str, refresh_token: str) -> None:
        self._tokens = {ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token}

    def clear(self) -> None:
        self._tokens = {}


class FileTokenStorage:
    """
    Tokens persisted to a JSON file so a session survives restarts.

    The file is written with owner-only permissions.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            # Corrupt file: behave as logged out
            return {}
        return data if isinstance(data, dict) else {}

    def get_access_token(self) -> str | None:
        return self._read().get(ACCESS_TOKEN_KEY)

    def get_refresh_token(self) -> str | None:
        return self._read().get(REFRESH_TOKEN_KEY)

    def store(self, access_token: str, refresh_token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({ACCESS_TOKEN_KEY: access_token, REFRESH_TOKEN_KEY: refresh_token}),
            encoding="utf-8",
        )
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
