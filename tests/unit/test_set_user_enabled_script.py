"""Tests for the account enable/disable admin script."""

import pytest

from auth_api.core.errors import AccountDisabled, InvalidOrExpired, NotFound
from auth_api.models.user import Users
from scripts.set_user_enabled import set_account_state

from tests.conftest import TEST_PASSWORD


@pytest.mark.unit
class TestSetAccountState:
    async def test_disable_revokes_sessions(self, db_session, create_user, auth_service):
        user = await create_user()
        first = await auth_service.login("alice@example.com", TEST_PASSWORD)
        await auth_service.login("alice@example.com", TEST_PASSWORD)

        user_id, active_sessions = await set_account_state(db_session, "Alice@Example.com", enabled=False)

        assert user_id == user.id
        assert active_sessions == 2
        assert (await db_session.get(Users, user_id)).enabled is False
        with pytest.raises(InvalidOrExpired):
            await auth_service.refresh(first.refresh_token)
        with pytest.raises(AccountDisabled):
            await auth_service.login("alice@example.com", TEST_PASSWORD)

    async def test_enable(self, db_session, create_user, auth_service):
        await create_user(enabled=False)

        await set_account_state(db_session, "alice@example.com", enabled=True)

        assert (await auth_service.login("alice@example.com", TEST_PASSWORD)).access_token

    async def test_unknown_email(self, db_session):
        with pytest.raises(NotFound):
            await set_account_state(db_session, "nobody@example.com", enabled=False)
