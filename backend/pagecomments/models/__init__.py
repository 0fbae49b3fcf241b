"""SQLAlchemy models."""

from pagecomments.models.base import Base, BaseModel
from pagecomments.models.enums import FieldType, MessageSeverity, RejectionReason
from pagecomments.models.form_session import FormSession, FormSessionEntry
from pagecomments.models.page import Page
from pagecomments.models.page_comment import PageComment

__all__ = [
    "Base",
    "BaseModel",
    "FieldType",
    "MessageSeverity",
    "RejectionReason",
    "Page",
    "PageComment",
    "FormSession",
    "FormSessionEntry",
]
