"""PageComment model for visitor comments on a page."""

from sqlalchemy import Column, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from pagecomments.models.base import BaseModel


class PageComment(BaseModel):
    """Comment left through the comment form, bound to its parent page."""

    __tablename__ = "page_comments"

    page_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    comment = Column(Text, nullable=False)

    page = relationship("Page", back_populates="comments")

    # Duplicate checks look comments up by exact body
    __table_args__ = (
        Index("idx_page_comments_comment_hash", "comment", postgresql_using="hash"),
    )
