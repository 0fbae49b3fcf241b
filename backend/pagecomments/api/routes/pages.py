"""JSON API routes for pages and their comments."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.api.deps import (
    ensure_form_session,
    get_form_session,
    require_admin_token,
    set_form_session_cookie,
)
from pagecomments.core.database import get_db
from pagecomments.core.forms import COMMENT_FORM_ID, get_form
from pagecomments.models.enums import RejectionReason
from pagecomments.models.form_session import FormSession
from pagecomments.schemas.comment import (
    CommentListResponse,
    CommentResponse,
    CreateCommentRequest,
)
from pagecomments.schemas.errors import ErrorResponse
from pagecomments.schemas.form import RenderedForm
from pagecomments.schemas.page import CreatePageRequest, PageListResponse, PageResponse
from pagecomments.services.comment_service import CommentService
from pagecomments.services.form_renderer import FormRenderer
from pagecomments.services.form_session_service import FormSessionService
from pagecomments.services.page_service import PageService

router = APIRouter()


@router.get("", response_model=PageListResponse, summary="List pages")
async def list_pages(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> PageListResponse:
    pages, total = await PageService(db).list(limit=limit, offset=offset)
    return PageListResponse(
        items=[PageResponse.model_validate(p) for p in pages],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=PageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create page",
    dependencies=[Depends(require_admin_token)],
)
async def create_page(
    request: CreatePageRequest,
    db: AsyncSession = Depends(get_db),
) -> PageResponse:
    """Create a page that visitors can comment on.

    Raises:
        401/403: Missing or invalid admin token
        409: URL segment already in use
    """
    page = await PageService(db).create(
        url_segment=request.url_segment,
        title=request.title,
        content=request.content,
    )
    await db.commit()
    return PageResponse.model_validate(page)


@router.get("/{page_id}", response_model=PageResponse, summary="Get page")
async def get_page(
    page_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> PageResponse:
    page = await PageService(db).get(page_id)
    return PageResponse.model_validate(page)


@router.get(
    "/{page_id}/comments",
    response_model=CommentListResponse,
    summary="List page comments",
)
async def list_page_comments(
    page_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> CommentListResponse:
    comments, total = await PageService(db).list_comments(
        page_id=page_id,
        limit=limit,
        offset=offset,
    )
    return CommentListResponse(
        items=[CommentResponse.model_validate(c) for c in comments],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/{page_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
    summary="Post a comment",
)
async def create_page_comment(
    page_id: UUID,
    request: CreateCommentRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    session: FormSession = Depends(ensure_form_session),
):
    """Submit the comment form as JSON.

    Runs the same rules as the HTML form post. A rejection returns 422 with
    the form-level message and per-field errors, and the submitted values are
    kept in the form session.
    """
    result = await CommentService(db).submit(
        page_id=page_id,
        form=get_form(COMMENT_FORM_ID),
        data=request.to_form_data(),
        session=session,
    )
    await db.commit()

    if not result.accepted:
        error = (
            "duplicate_comment"
            if result.reason is RejectionReason.DUPLICATE
            else "validation_error"
        )
        body = ErrorResponse(
            error=error,
            message=result.message,
            severity=result.severity.value,
            details=result.field_errors or None,
        )
        rejected = JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=body.model_dump(),
        )
        set_form_session_cookie(rejected, session)
        return rejected

    set_form_session_cookie(response, session)
    return CommentResponse.model_validate(result.comment)


@router.get(
    "/{page_id}/comment-form",
    response_model=RenderedForm,
    summary="Get comment form state",
)
async def get_comment_form(
    page_id: UUID,
    db: AsyncSession = Depends(get_db),
    session: FormSession | None = Depends(get_form_session),
) -> RenderedForm:
    """Comment form as the next render would show it. Does not consume the message."""
    page = await PageService(db).get(page_id)
    return await FormRenderer(FormSessionService(db)).render(
        get_form(COMMENT_FORM_ID),
        page.id,
        session,
    )
