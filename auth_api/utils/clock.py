"""
UTC time helpers.

New timestamps are timezone-aware UTC. MySQL/MariaDB DATETIME and SQLite keep
no offset, so values read back may be naive; those are UTC by convention.
"""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Aware UTC view of a stored timestamp (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def expires_at(ttl: timedelta, now: datetime | None = None) -> datetime:
    """Absolute UTC expiry for a lifetime starting now."""
    return (now or utc_now()) + ttl


def is_expired(expiry: datetime, now: datetime | None = None) -> bool:
    """True once the expiry instant has been reached."""
    return as_utc(expiry) <= as_utc(now or utc_now())
