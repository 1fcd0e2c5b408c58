"""Tests for UTC time helpers and timestamp storage."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from auth_api.models.user import Users
from auth_api.utils import as_utc, expires_at, is_expired, utc_now


@pytest.mark.unit
class TestClock:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None
        assert utc_now().utcoffset() == timedelta(0)

    def test_as_utc_treats_naive_as_utc(self):
        naive = datetime(2026, 1, 1, 12, 0, 0)
        assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)

    def test_as_utc_converts_other_offsets(self):
        plus_two = datetime(2026, 1, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert as_utc(plus_two) == datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)

    def test_expires_at(self):
        now = datetime(2026, 1, 1, tzinfo=UTC)
        assert expires_at(timedelta(days=7), now) == datetime(2026, 1, 8, tzinfo=UTC)

    @pytest.mark.parametrize(
        "expiry,expected",
        [
            (datetime(2026, 1, 1, 11, 59, 59), True),
            (datetime(2026, 1, 1, 12, 0, 0), True),
            (datetime(2026, 1, 1, 12, 0, 1), False),
            (datetime(2026, 1, 1, 12, 0, 1, tzinfo=UTC), False),
        ],
    )
    def test_is_expired_mixes_naive_and_aware(self, expiry, expected):
        now = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)
        assert is_expired(expiry, now) is expected


@pytest.mark.unit
class TestTimestampStorage:
    async def test_user_timestamps_persist(self, db_session, create_user):
        before = utc_now()
        user = await create_user()

        stored = (await db_session.execute(select(Users.created_at).where(Users.id == user.id))).scalar_one()

        assert before - timedelta(seconds=1) <= as_utc(stored) <= utc_now()
