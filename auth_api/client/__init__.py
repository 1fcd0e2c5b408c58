"""
Session client for consumers of the Auth API.
"""

from auth_api.client.session import ApiError, SessionClient, SessionExpired
from auth_api.client.storage import FileTokenStorage, MemoryTokenStorage, TokenStorage

__all__ = [
    "ApiError",
    "FileTokenStorage",
    "MemoryTokenStorage",
    "SessionClient",
    "SessionExpired",
    "TokenStorage",
]
