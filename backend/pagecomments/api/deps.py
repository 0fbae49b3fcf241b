"""FastAPI dependencies for form sessions, form routing and admin access."""
import hmac
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.core.config import get_settings
from pagecomments.core.database import get_db
from pagecomments.core.forms import FormDefinition, get_form
from pagecomments.core.request_context import bind_form_session
from pagecomments.models.form_session import FormSession
from pagecomments.services.form_session_service import FormSessionService


def get_form_session_token(request: Request) -> str | None:
    """Read the form session token from the request cookie."""
    return request.cookies.get(get_settings().form_session_cookie_name)


async def get_form_session(
    token: str | None = Depends(get_form_session_token),
    db: AsyncSession = Depends(get_db),
) -> FormSession | None:
    """Current visitor's live form session, without creating one."""
    session = await FormSessionService(db).load(token)
    if session is not None:
        bind_form_session(session.id)
    return session


async def ensure_form_session(
    token: str | None = Depends(get_form_session_token),
    db: AsyncSession = Depends(get_db),
) -> FormSession:
    """Current visitor's form session, created on first submission."""
    session = await FormSessionService(db).ensure(token)
    bind_form_session(session.id)
    return session


def set_form_session_cookie(response: Response, session: FormSession) -> None:
    """Send (or refresh) the form session cookie."""
    settings = get_settings()
    response.set_cookie(
        key=settings.form_session_cookie_name,
        value=session.token,
        httponly=True,
        secure=settings.form_session_cookie_is_secure,
        samesite=settings.form_session_cookie_samesite,
        path=settings.form_session_cookie_path,
        domain=settings.form_session_cookie_domain,
        max_age=settings.form_session_ttl_hours * 60 * 60,
    )


@dataclass(frozen=True)
class FormActionTarget:
    form: FormDefinition
    action: str


def resolve_form_action(form_id: str, action: str) -> FormActionTarget:
    """Allow only registered forms and their declared submit actions.

    Runs before the request body is read, so a disallowed action never
    reaches a submission handler.

    Raises:
        HTTPException: 403 if the form or action is not allowed
    """
    form = get_form(form_id)
    if form is None or not form.has_action(action):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Action '{action}' is not allowed on form '{form_id}'",
        )
    return FormActionTarget(form=form, action=action)


def require_admin_token(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
) -> None:
    """Guard for page management endpoints.

    Raises:
        HTTPException: 401 if the header is missing
        HTTPException: 403 if admin access is disabled or the token is wrong
    """
    expected = get_settings().admin_token
    if not x_admin_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing admin token",
        )
    if not expected or not hmac.compare_digest(x_admin_token.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token",
        )
