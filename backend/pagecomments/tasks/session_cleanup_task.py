"""Celery task purging expired form sessions."""

import asyncio
import logging
import time

from pagecomments.core.database import AsyncSessionLocal
from pagecomments.core.metrics import FORM_SESSIONS_PURGED_TOTAL
from pagecomments.core.structured_logging import log_json
from pagecomments.services.form_session_service import FormSessionService
from pagecomments.tasks.celery_app import PURGE_TASK_NAME, celery_app

logger = logging.getLogger(__name__)


async def purge_expired_sessions() -> int:
    """Delete expired form sessions in one transaction; returns the count."""
    async with AsyncSessionLocal() as session:
        try:
            deleted = await FormSessionService(session).purge_expired()
            await session.commit()
            return deleted
        except Exception:
            await session.rollback()
            raise


@celery_app.task(name=PURGE_TASK_NAME)
def purge_expired_form_sessions() -> int:
    """Runs hourly via Celery Beat (see `pagecomments.tasks.celery_app`)."""

    started = time.perf_counter()
    log_json(logger, logging.INFO, "form_session_cleanup_start")

    try:
        deleted = asyncio.run(purge_expired_sessions())
    except Exception as exc:
        duration_ms = (time.perf_counter() - started) * 1000
        log_json(
            logger,
            logging.ERROR,
            "form_session_cleanup_error",
            duration_ms=round(duration_ms, 2),
            error=str(exc),
            exception=exc.__class__.__name__,
        )
        raise

    FORM_SESSIONS_PURGED_TOTAL.inc(deleted)
    duration_ms = (time.perf_counter() - started) * 1000
    log_json(
        logger,
        logging.INFO,
        "form_session_cleanup_done",
        deleted=deleted,
        duration_ms=round(duration_ms, 2),
    )
    return deleted
