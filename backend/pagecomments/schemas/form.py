"""Pydantic schemas for rendered forms."""

from pydantic import BaseModel

from pagecomments.models.enums import FieldType, MessageSeverity


class FormMessage(BaseModel):
    """Form-level message left by the last submission."""

    message: str
    severity: MessageSeverity


class RenderedField(BaseModel):
    name: str
    title: str
    field_type: FieldType
    required: bool
    max_length: int | None = None
    value: str = ""
    error: str | None = None


class RenderedAction(BaseModel):
    name: str
    title: str


class RenderedForm(BaseModel):
    """A form as it should be displayed on this render."""

    form_id: str
    action_url: str
    fields: list[RenderedField]
    actions: list[RenderedAction]
    message: FormMessage | None = None
