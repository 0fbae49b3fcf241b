"""Validation rules for comment form submissions."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.core.config import get_settings
from pagecomments.core.forms import FormDefinition
from pagecomments.models.enums import FieldType, MessageSeverity, RejectionReason
from pagecomments.models.page_comment import PageComment

REQUIRED_MESSAGE = "Please fill in all required fields"
INVALID_MESSAGE = "Please correct the highlighted fields"
DUPLICATE_MESSAGE = "That comment already exists! Spammer!"

_email_adapter = TypeAdapter(EmailStr)


@dataclass
class ValidationResult:
    """Outcome of validating one submission.

    `field_errors` maps field name to message; it is empty for form-level
    rejections such as the duplicate check.
    """

    valid: bool
    message: str | None = None
    severity: MessageSeverity | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    reason: RejectionReason | None = None

    @classmethod
    def accept(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def reject(
        cls,
        reason: RejectionReason,
        message: str,
        field_errors: dict[str, str] | None = None,
    ) -> ValidationResult:
        return cls(
            valid=False,
            message=message,
            severity=MessageSeverity.BAD,
            field_errors=field_errors or {},
            reason=reason,
        )


def normalize_submission(form: FormDefinition, data: dict) -> dict[str, str]:
    """Keep only the form's declared fields, as stripped strings."""
    cleaned: dict[str, str] = {}
    for name in form.field_names:
        value = data.get(name)
        cleaned[name] = value.strip() if isinstance(value, str) else ""
    return cleaned


def check_required(form: FormDefinition, data: dict[str, str]) -> dict[str, str]:
    return {
        f.name: f"{f.title} is required"
        for f in form.fields
        if form.is_required(f.name) and not data.get(f.name)
    }


def check_field_values(form: FormDefinition, data: dict[str, str]) -> dict[str, str]:
    """Type and length checks for fields that have a value."""
    errors: dict[str, str] = {}
    for f in form.fields:
        value = data.get(f.name)
        if not value:
            continue
        if f.max_length is not None and len(value) > f.max_length:
            errors[f.name] = f"{f.title} must be at most {f.max_length} characters"
        elif f.field_type is FieldType.EMAIL:
            try:
                _email_adapter.validate_python(value)
            except ValidationError:
                errors[f.name] = "Please enter a valid email address"
    return errors


class CommentValidator:
    """Applies the comment form rules in order.

    1. required fields must be non-empty
    2. field values must pass their type/length checks
    3. a body longer than the duplicate threshold must not repeat an
       existing comment
    """

    body_field = "Comment"

    def __init__(self, db: AsyncSession, duplicate_min_length: int | None = None):
        self.db = db
        if duplicate_min_length is None:
            duplicate_min_length = get_settings().duplicate_comment_min_length
        self.duplicate_min_length = duplicate_min_length

    async def validate(self, form: FormDefinition, data: dict[str, str]) -> ValidationResult:
        missing = check_required(form, data)
        if missing:
            return ValidationResult.reject(RejectionReason.REQUIRED, REQUIRED_MESSAGE, missing)

        invalid = check_field_values(form, data)
        if invalid:
            return ValidationResult.reject(RejectionReason.INVALID, INVALID_MESSAGE, invalid)

        body = data.get(self.body_field, "")
        if len(body) > self.duplicate_min_length and await self.is_duplicate(body):
            return ValidationResult.reject(RejectionReason.DUPLICATE, DUPLICATE_MESSAGE)

        return ValidationResult.accept()

    async def is_duplicate(self, body: str) -> bool:
        """Whether any stored comment has exactly this body text."""
        query = select(PageComment.id).where(PageComment.comment == body).limit(1)
        return (await self.db.scalar(query)) is not None
