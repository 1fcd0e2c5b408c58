"""
ARQ worker configuration and job definitions.

Run worker with: arq auth_api.tasks.worker.WorkerSettings
"""

from typing import Any

from arq.connections import RedisSettings
from arq.cron import cron
from arq.worker import func

from auth_api.config import settings
from auth_api.core.logging import configure_logging, get_logger
from auth_api.tasks.token_jobs import purge_expired_refresh_tokens_job

logger = get_logger(__name__)


async def startup(ctx: dict[str, Any]) -> None:
    """Worker startup - initialize any shared resources."""
    configure_logging()
    logger.info("arq_worker_starting", redis_url=settings.ARQ_REDIS_URL)


async def shutdown(ctx: dict[str, Any]) -> None:
    """Worker shutdown - cleanup resources."""
    from auth_api.core.database import engine

    await engine.dispose()
    logger.info("arq_worker_shutdown")


class WorkerSettings:
    """ARQ worker configuration."""

    # Redis connection from settings
    redis_settings = RedisSettings.from_dsn(settings.ARQ_REDIS_URL)

    # Worker behavior
    max_jobs = 10
    job_timeout = 300  # 5 minutes max per job

    # Lifecycle hooks
    on_startup = startup
    on_shutdown = shutdown

    # Job functions (can also be enqueued manually)
    functions = [
        func(purge_expired_refresh_tokens_job, max_tries=3),
    ]

    # Hourly sweep of expired refresh tokens
    cron_jobs = [
        cron(
            purge_expired_refresh_tokens_job,
            minute=settings.REFRESH_TOKEN_SWEEP_MINUTE,
            run_at_startup=False,
        ),
    ]
