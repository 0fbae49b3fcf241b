"""HTML page rendering and form-post routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.api.deps import (
    FormActionTarget,
    ensure_form_session,
    get_form_session,
    resolve_form_action,
    set_form_session_cookie,
)
from pagecomments.core.database import get_db
from pagecomments.core.forms import COMMENT_FORM_ID, get_form
from pagecomments.models.form_session import FormSession
from pagecomments.services.comment_service import CommentService
from pagecomments.services.form_renderer import FormRenderer
from pagecomments.services.form_session_service import FormSessionService, form_message_key
from pagecomments.services.page_renderer import render_page_html
from pagecomments.services.page_service import PageService

router = APIRouter()

# Submission handler per registered form
SUBMISSION_HANDLERS = {
    COMMENT_FORM_ID: CommentService,
}

COMMENTS_PER_PAGE = 200


@router.get("/{page_id}", response_class=HTMLResponse, summary="Render page")
async def render_page(
    page_id: UUID,
    comments_offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    session: FormSession | None = Depends(get_form_session),
) -> HTMLResponse:
    """Render a page with its comments and the comment form.

    A pending form message is shown once and then dropped; rejected field
    values stay in the session until the form is submitted successfully.
    Comments are shown COMMENTS_PER_PAGE at a time, oldest first.
    """
    pages = PageService(db)
    sessions = FormSessionService(db)

    page = await pages.get(page_id)
    comments, total = await pages.list_comments(
        page_id=page.id,
        limit=COMMENTS_PER_PAGE,
        offset=comments_offset,
    )

    form = get_form(COMMENT_FORM_ID)
    rendered = await FormRenderer(sessions).render(form, page.id, session)
    if rendered.message is not None:
        await sessions.clear(session, form_message_key(form.form_id))
        await db.commit()

    return HTMLResponse(
        render_page_html(
            page,
            comments,
            rendered,
            total=total,
            offset=comments_offset,
            limit=COMMENTS_PER_PAGE,
        )
    )


@router.post(
    "/{page_id}/{form_id}/{action}",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    summary="Submit a page form",
)
async def submit_page_form(
    request: Request,
    page_id: UUID,
    target: FormActionTarget = Depends(resolve_form_action),
    db: AsyncSession = Depends(get_db),
    session: FormSession = Depends(ensure_form_session),
) -> RedirectResponse:
    """Handle a form-encoded submission and redirect back to the page.

    The outcome message and any rejected values are left in the visitor's
    form session for the page render that follows the redirect.

    Raises:
        403: Form or action not allowed
        404: Page not found
    """
    form_data = await request.form()
    data = {key: value for key, value in form_data.items() if isinstance(value, str)}

    handler = SUBMISSION_HANDLERS[target.form.form_id](db)
    result = await handler.submit(
        page_id=page_id,
        form=target.form,
        data=data,
        session=session,
    )
    await db.commit()

    response = RedirectResponse(url=result.redirect_to, status_code=status.HTTP_303_SEE_OTHER)
    set_form_session_cookie(response, session)
    return response
