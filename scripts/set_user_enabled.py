#!/usr/bin/env python3
"""
Enable or disable a user account.

Disabling an account revokes all of its refresh tokens, so every session ends
once its current access token expires. The account cannot log in again until
it is re-enabled.

Usage:
    # Disable an account (ends all sessions)
    python scripts/set_user_enabled.py alice@example.com --disable

    # Re-enable it
    python scripts/set_user_enabled.py alice@example.com --enable
"""

import argparse
import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from auth_api.core.auth import get_refresh_ttl, get_token_codec
from auth_api.core.database import engine, get_async_session
from auth_api.core.errors import NotFound
from auth_api.services.auth import AuthService
from auth_api.services.credentials import get_user_by_email


async def set_account_state(db: AsyncSession, email: str, enabled: bool) -> tuple[str, int]:
    """
    Enable or disable the account registered under an email.

    Returns:
        (user ID, number of refresh tokens the account held beforehand)

    Raises:
        NotFound: No account with this email
    """
    user = await get_user_by_email(db, email)
    if user is None:
        raise NotFound(f"No account for {email}")

    service = AuthService(db, get_token_codec(), get_refresh_ttl())
    active_sessions = await service.store.count_for_user(user.id)
    await service.set_enabled(user.id, enabled)
    return user.id, active_sessions


async def main() -> int:
    parser = argparse.ArgumentParser(description="Enable or disable a user account")
    parser.add_argument("email", help="Email of the account")
    state = parser.add_mutually_exclusive_group(required=True)
    state.add_argument("--enable", action="store_true", help="Allow the account to log in")
    state.add_argument("--disable", action="store_true", help="Block the account and end its sessions")
    args = parser.parse_args()

    try:
        async with get_async_session() as db:
            try:
                user_id, active_sessions = await set_account_state(db, args.email, enabled=args.enable)
            except NotFound as e:
                print(f"ERROR: {e.message}")
                return 1
    finally:
        await engine.dispose()

    if args.enable:
        print(f"Enabled account {args.email} ({user_id})")
    else:
        print(f"Disabled account {args.email} ({user_id}), revoked {active_sessions} refresh token(s)")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
