"""Server-side form session models.

A FormSession is identified to the browser by an opaque cookie token. Its
entries hold short-lived values such as rejected form data and pending form
messages.
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from pagecomments.models.base import BaseModel


class FormSession(BaseModel):
    """Visitor session backing transient form state."""

    __tablename__ = "form_sessions"

    token = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    entries = relationship(
        "FormSessionEntry",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<FormSession(id={self.id}, expires_at={self.expires_at})>"


class FormSessionEntry(BaseModel):
    """Single key/value slot of a form session."""

    __tablename__ = "form_session_entries"
    __table_args__ = (
        UniqueConstraint("session_id", "key", name="uq_form_session_entries_session_key"),
    )

    session_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("form_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key = Column(String(255), nullable=False)
    value = Column(JSON, nullable=False)

    session = relationship("FormSession", back_populates="entries")
