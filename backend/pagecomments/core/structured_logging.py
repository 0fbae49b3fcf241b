"""JSON log lines for the comment service.

Every line carries the event name, a UTC timestamp and, when available, the
request correlation ID and form session ID from `request_context`.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from pagecomments.core.request_context import get_form_session_id, get_request_id

# Submitted field values never go into logs; only their lengths do.
_SUMMARIZED_FIELDS = frozenset({"Name", "Email", "Comment"})


def summarize_submission(data: dict[str, Any]) -> dict[str, int]:
    """Map each submitted field to the length of its value."""

    return {
        key: len(value) if isinstance(value, str) else 0
        for key, value in data.items()
        if key in _SUMMARIZED_FIELDS
    }


def log_json(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """Emit a single JSON log line with request and form session correlation."""

    payload: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "event": event,
    }
    request_id = get_request_id()
    if request_id:
        payload["request_id"] = request_id
    form_session_id = get_form_session_id()
    if form_session_id:
        payload["form_session_id"] = form_session_id

    payload.update(fields)
    logger.log(level, json.dumps(payload, default=str))
