"""Per-request logging context.

Holds the correlation ID of the current HTTP request (or Celery task) and the
form session handling it, so log lines can be tied back to one visitor's
submit/redirect/render cycle.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from uuid import uuid4

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_form_session_var: ContextVar[str | None] = ContextVar("form_session_id", default=None)


def get_request_id() -> str | None:
    return _request_id_var.get()


def set_request_id(request_id: str | None) -> Token[str | None]:
    """Set the correlation ID and return the token needed to reset it."""

    return _request_id_var.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    _request_id_var.reset(token)


def new_request_id() -> str:
    return str(uuid4())


def get_form_session_id() -> str | None:
    """Database ID of the form session bound to the current request, if any."""

    return _form_session_var.get()


def bind_form_session(session_id: object | None) -> None:
    """Attach a form session to the current context.

    Not reset explicitly: the value lives in the request's own context copy
    and disappears with it.
    """

    _form_session_var.set(str(session_id) if session_id is not None else None)


@contextmanager
def request_id_context(request_id: str | None):
    """Context manager that sets the correlation ID for the duration."""

    token = set_request_id(request_id)
    try:
        yield
    finally:
        reset_request_id(token)
