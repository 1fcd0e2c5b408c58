"""
End-to-end session flows through the HTTP API.

Each test walks a client through several endpoints and checks the state the
server keeps between them.
"""

import pytest
from httpx import AsyncClient

from auth_api.models.refresh_token import RefreshTokens

from tests.conftest import TEST_PASSWORD


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.integration
class TestSessionFlows:
    async def test_register_refresh_logout(self, client: AsyncClient, register_payload):
        registered = (await client.post("/api/auth/register", json=register_payload)).json()

        me = await client.get("/api/auth/me", headers=_bearer(registered["accessToken"]))
        assert me.json()["email"] == "alice@example.com"

        rotated = (await client.post("/api/auth/refresh", json={"refreshToken": registered["refreshToken"]})).json()
        assert rotated["refreshToken"] != registered["refreshToken"]

        logout = await client.post("/api/auth/logout", headers=_bearer(rotated["accessToken"]))
        assert logout.status_code == 204

        after = await client.post("/api/auth/refresh", json={"refreshToken": rotated["refreshToken"]})
        assert after.status_code == 401
        assert after.json()["code"] == "INVALID_OR_EXPIRED"

    async def test_rotation_chain_is_single_use(self, client: AsyncClient, register_payload):
        tokens = (await client.post("/api/auth/register", json=register_payload)).json()
        seen = [tokens["refreshToken"]]

        for _ in range(3):
            tokens = (await client.post("/api/auth/refresh", json={"refreshToken": tokens["refreshToken"]})).json()
            seen.append(tokens["refreshToken"])

        assert len(set(seen)) == len(seen)
        for stale in seen[:-1]:
            response = await client.post("/api/auth/refresh", json={"refreshToken": stale})
            assert response.status_code == 401

        final = await client.post("/api/auth/refresh", json={"refreshToken": seen[-1]})
        assert final.status_code == 200

    async def test_independent_sessions(self, client: AsyncClient, db_session, register_payload):
        await client.post("/api/auth/register", json=register_payload)
        credentials = {"email": "alice@example.com", "password": TEST_PASSWORD}

        laptop = (await client.post("/api/auth/login", json=credentials)).json()
        phone = (await client.post("/api/auth/login", json=credentials)).json()

        laptop_next = await client.post("/api/auth/refresh", json={"refreshToken": laptop["refreshToken"]})
        phone_next = await client.post("/api/auth/refresh", json={"refreshToken": phone["refreshToken"]})

        assert laptop_next.status_code == phone_next.status_code == 200
        # register + two rotated logins
        assert len((await db_session.execute(RefreshTokens.__table__.select())).all()) == 3

    async def test_login_then_refresh_returns_new_pair(self, client: AsyncClient, create_user):
        await create_user()
        login = (
            await client.post("/api/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
        ).json()

        refreshed = (await client.post("/api/auth/refresh", json={"refreshToken": login["refreshToken"]})).json()

        assert refreshed["refreshToken"] != login["refreshToken"]
        assert refreshed["expiresIn"] == login["expiresIn"]
