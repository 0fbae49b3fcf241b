"""Form definitions for page forms.

A form is a declared list of fields, the submit actions a visitor may post to,
and the names of the fields that must be filled in. Definitions are static;
per-render values come from `FormRenderer`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pagecomments.core.config import get_settings
from pagecomments.models.enums import FieldType

COMMENT_FORM_ID = "CommentForm"
COMMENT_FORM_ACTION = "doPostComment"


@dataclass(frozen=True)
class FormField:
    """Input field of a form."""

    name: str
    title: str
    field_type: FieldType = FieldType.TEXT
    max_length: int | None = None


@dataclass(frozen=True)
class FormAction:
    """Submit button; `name` is the URL segment the form posts to."""

    name: str
    title: str


@dataclass(frozen=True)
class FormDefinition:
    form_id: str
    fields: tuple[FormField, ...]
    actions: tuple[FormAction, ...]
    required_fields: frozenset[str] = field(default_factory=frozenset)

    def get_field(self, name: str) -> FormField | None:
        for form_field in self.fields:
            if form_field.name == name:
                return form_field
        return None

    def has_action(self, action: str) -> bool:
        return any(a.name == action for a in self.actions)

    def is_required(self, name: str) -> bool:
        return name in self.required_fields

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def action_url(self, page_id: object, action: str | None = None) -> str:
        """URL the form posts to for a given page."""
        action = action or self.actions[0].name
        return f"/pages/{page_id}/{self.form_id}/{action}"


def build_comment_form() -> FormDefinition:
    """Name/Email/Comment form with a single Post action; every field is required."""
    settings = get_settings()
    return FormDefinition(
        form_id=COMMENT_FORM_ID,
        fields=(
            FormField("Name", "Name", FieldType.TEXT, max_length=255),
            FormField("Email", "Email", FieldType.EMAIL, max_length=255),
            FormField(
                "Comment",
                "Comment",
                FieldType.TEXTAREA,
                max_length=settings.comment_max_length,
            ),
        ),
        actions=(FormAction(COMMENT_FORM_ACTION, "Post"),),
        required_fields=frozenset({"Name", "Email", "Comment"}),
    )


# Forms reachable through /pages/{page_id}/{form_id}/{action}
FORM_BUILDERS = {
    COMMENT_FORM_ID: build_comment_form,
}


def get_form(form_id: str) -> FormDefinition | None:
    """Look up a registered form by ID, or None if no such form exists."""
    builder = FORM_BUILDERS.get(form_id)
    return builder() if builder else None
