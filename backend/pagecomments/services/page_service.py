"""Service for pages and their comment listings."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.models.page import Page
from pagecomments.models.page_comment import PageComment


class PageService:
    """Service for creating pages and reading pages with their comments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, page_id: UUID) -> Page:
        """Get a page by ID.

        Raises:
            HTTPException: 404 if the page does not exist
        """
        page = await self.db.get(Page, page_id)
        if page is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Page not found",
            )
        return page

    async def create(self, *, url_segment: str, title: str, content: str = "") -> Page:
        """Create a page.

        Raises:
            HTTPException: 409 if another page already uses the URL segment
        """
        existing = await self.db.scalar(select(Page.id).where(Page.url_segment == url_segment))
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"A page with URL segment '{url_segment}' already exists",
            )

        page = Page(url_segment=url_segment, title=title, content=content)
        self.db.add(page)
        await self.db.flush()
        await self.db.refresh(page)
        return page

    async def list(self, *, limit: int = 50, offset: int = 0) -> tuple[list[Page], int]:
        total = int((await self.db.scalar(select(func.count()).select_from(Page))) or 0)
        query = (
            select(Page)
            .order_by(Page.created_at.desc(), Page.title)
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def list_comments(
        self,
        *,
        page_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[PageComment], int]:
        """List a page's comments, oldest first."""
        await self.get(page_id)

        count_query = (
            select(func.count())
            .select_from(PageComment)
            .where(PageComment.page_id == page_id)
        )
        total = int((await self.db.scalar(count_query)) or 0)

        query = (
            select(PageComment)
            .where(PageComment.page_id == page_id)
            .order_by(PageComment.created_at.asc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total
