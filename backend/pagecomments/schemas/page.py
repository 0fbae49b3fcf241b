"""Pydantic schemas for pages."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreatePageRequest(BaseModel):
    """Request schema for creating a page."""

    model_config = ConfigDict(extra="forbid")

    url_segment: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field("", max_length=100_000)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v


class PageResponse(BaseModel):
    id: UUID
    url_segment: str
    title: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PageListResponse(BaseModel):
    """Paginated list response for pages."""

    items: list[PageResponse]
    total: int
    limit: int
    offset: int
