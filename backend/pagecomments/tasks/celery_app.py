"""Celery worker and beat for form session housekeeping.

The only scheduled job purges expired form sessions. While a task runs its
Celery task ID is bound as the request correlation ID, so `log_json` lines
from the purge can be matched to the worker's own task logs.
"""

from __future__ import annotations

import logging
import os
from contextvars import Token

from celery import Celery
from celery.schedules import crontab
from celery.signals import task_postrun, task_prerun

from pagecomments.core.request_context import reset_request_id, set_request_id

logger = logging.getLogger(__name__)

PURGE_TASK_NAME = "pagecomments.tasks.session_cleanup_task.purge_expired_form_sessions"

# Correlation tokens of running tasks, keyed by task ID
_correlation_tokens: dict[str, Token[str | None]] = {}


def _broker_url() -> str:
    return os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")


celery_app = Celery(
    "pagecomments",
    broker=_broker_url(),
    backend=os.getenv("CELERY_RESULT_BACKEND", _broker_url()),
    include=["pagecomments.tasks.session_cleanup_task"],
)

celery_app.conf.update(
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        # Hourly, off the top of the hour
        "form-session-cleanup-hourly": {
            "task": PURGE_TASK_NAME,
            "schedule": crontab(minute=15),
        }
    },
)


@task_prerun.connect
def bind_task_correlation_id(task_id: str | None = None, **_: object) -> None:
    """Bind the task ID as correlation ID before a task body runs."""
    if task_id:
        _correlation_tokens[task_id] = set_request_id(task_id)


@task_postrun.connect
def release_task_correlation_id(task_id: str | None = None, **_: object) -> None:
    """Restore the worker's previous correlation ID once the task is done.

    Runs after failures too, so a crashed purge does not leak its ID into
    the next task handled by the same worker process.
    """
    token = _correlation_tokens.pop(task_id, None) if task_id else None
    if token is None:
        return
    try:
        reset_request_id(token)
    except ValueError:
        # Token created in another context (e.g. eager mode across threads)
        logger.warning("Could not restore correlation ID after task %s", task_id)
