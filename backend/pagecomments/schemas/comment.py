"""Pydantic schemas for page comments."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateCommentRequest(BaseModel):
    """JSON body for posting a comment.

    Accepts anything an HTML form post could carry: unknown keys are
    ignored and missing, null or non-string values become "". Emptiness,
    length, email syntax and duplicates are then reported by the comment
    form rules.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field("", alias="Name")
    email: str = Field("", alias="Email")
    comment: str = Field("", alias="Comment")

    @field_validator("name", "email", "comment", mode="before")
    @classmethod
    def non_string_as_empty(cls, value: object) -> str:
        return value if isinstance(value, str) else ""

    def to_form_data(self) -> dict[str, str]:
        return {"Name": self.name, "Email": self.email, "Comment": self.comment}


class CommentResponse(BaseModel):
    """Response schema for a page comment.

    The author's email is not exposed.
    """

    id: UUID
    page_id: UUID
    name: str
    comment: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentListResponse(BaseModel):
    """Paginated list response for page comments."""

    items: list[CommentResponse]
    total: int
    limit: int
    offset: int
