"""
Utility functions
"""

from auth_api.utils.clock import as_utc, expires_at, is_expired, utc_now

__all__ = [
    "as_utc",
    "expires_at",
    "is_expired",
    "utc_now",
]
