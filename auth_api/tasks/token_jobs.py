"""Refresh token housekeeping jobs for arq worker."""

from datetime import timedelta
from typing import Any

from arq import Retry

from auth_api.config import settings
from auth_api.core.database import get_async_session
from auth_api.core.logging import bind_context, get_logger, unbind_context
from auth_api.services.refresh_tokens import RefreshTokenStore

logger = get_logger(__name__)


async def purge_expired_refresh_tokens_job(ctx: dict[str, Any]) -> dict[str, int]:
    """
    Delete refresh tokens whose expiry has passed.

    Expired tokens are already refused on use; this only keeps the table small.

    Args:
        ctx: ARQ context dict

    Returns:
        dict with the number of deleted tokens

    Raises:
        Retry: If database operation fails
    """
    bind_context(task="refresh_token_sweep")

    try:
        async with get_async_session() as db:
            store = RefreshTokenStore(db, timedelta(milliseconds=settings.REFRESH_TOKEN_EXPIRE_MS))
            deleted = await store.purge_expired()
            await db.commit()

        logger.info("refresh_token_sweep_completed", deleted=deleted)
        return {"deleted": deleted}

    except Exception as e:
        logger.error(
            "refresh_token_sweep_failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        # Retry with backoff
        raise Retry(defer=ctx.get("job_try", 1) * 5) from e
    finally:
        unbind_context("task")
