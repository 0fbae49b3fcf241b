"""Builds the per-render view of a form."""

from __future__ import annotations

from uuid import UUID

from pagecomments.core.forms import FormDefinition
from pagecomments.models.enums import MessageSeverity
from pagecomments.models.form_session import FormSession
from pagecomments.schemas.form import FormMessage, RenderedAction, RenderedField, RenderedForm
from pagecomments.services.form_session_service import (
    FormSessionService,
    form_data_key,
    form_message_key,
)


def build_rendered_form(
    form: FormDefinition,
    page_id: UUID,
    saved_data: dict | None = None,
    saved_message: dict | None = None,
) -> RenderedForm:
    """Fresh field list, pre-populated from `saved_data` when given."""
    saved_data = saved_data or {}
    field_errors = (saved_message or {}).get("field_errors") or {}

    fields = [
        RenderedField(
            name=f.name,
            title=f.title,
            field_type=f.field_type,
            required=form.is_required(f.name),
            max_length=f.max_length,
            value=str(saved_data.get(f.name) or ""),
            error=field_errors.get(f.name),
        )
        for f in form.fields
    ]

    message = None
    if saved_message and saved_message.get("message"):
        message = FormMessage(
            message=saved_message["message"],
            severity=MessageSeverity(saved_message.get("severity", MessageSeverity.BAD.value)),
        )

    return RenderedForm(
        form_id=form.form_id,
        action_url=form.action_url(page_id),
        fields=fields,
        actions=[RenderedAction(name=a.name, title=a.title) for a in form.actions],
        message=message,
    )


class FormRenderer:
    """Reads a form's saved state from the visitor's session and renders it.

    Read-only: neither the saved values nor the pending message are touched.
    """

    def __init__(self, sessions: FormSessionService):
        self.sessions = sessions

    async def render(
        self,
        form: FormDefinition,
        page_id: UUID,
        session: FormSession | None,
    ) -> RenderedForm:
        saved_data = await self.sessions.get(session, form_data_key(form.form_id))
        saved_message = await self.sessions.get(session, form_message_key(form.form_id))
        return build_rendered_form(form, page_id, saved_data, saved_message)
