"""Page model."""
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from pagecomments.models.base import BaseModel


class Page(BaseModel):
    """Content page that visitors can comment on.

    `url_segment` is the unique slug a page is addressed by in links; the
    comment form itself posts to the page's ID.
    """

    __tablename__ = "pages"

    url_segment = Column(String(255), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, server_default="")

    comments = relationship(
        "PageComment",
        back_populates="page",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PageComment.created_at",
    )

    def __repr__(self) -> str:
        return f"<Page(id={self.id}, url_segment={self.url_segment})>"
