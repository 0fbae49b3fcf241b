"""Enumerations shared by models, schemas and services."""

from enum import Enum


class MessageSeverity(str, Enum):
    """Styling tag for user-facing form messages."""

    GOOD = "good"
    BAD = "bad"


class FieldType(str, Enum):
    """Input widget types a form field can render as."""

    TEXT = "text"
    EMAIL = "email"
    TEXTAREA = "textarea"


class RejectionReason(str, Enum):
    """Why a form submission was rejected.

    - REQUIRED: one or more required fields were empty
    - INVALID: a field value failed its type or length check
    - DUPLICATE: the comment body repeats an existing comment
    """

    REQUIRED = "required"
    INVALID = "invalid"
    DUPLICATE = "duplicate"
