"""Comment form submission handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.core.forms import FormDefinition
from pagecomments.core.metrics import observe_submission
from pagecomments.core.structured_logging import log_json, summarize_submission
from pagecomments.models.enums import MessageSeverity, RejectionReason
from pagecomments.models.form_session import FormSession
from pagecomments.models.page_comment import PageComment
from pagecomments.services.comment_validator import CommentValidator, normalize_submission
from pagecomments.services.form_session_service import (
    FormSessionService,
    form_data_key,
    form_message_key,
)
from pagecomments.services.page_service import PageService

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Thanks for your comment!"


@dataclass
class SubmissionResult:
    """What the caller needs to respond: the message to show and where to go."""

    accepted: bool
    message: str
    severity: MessageSeverity
    redirect_to: str
    field_errors: dict[str, str] = field(default_factory=dict)
    reason: RejectionReason | None = None
    comment: PageComment | None = None


class CommentService:
    """Validates a submission and either stores the comment or the rejected values."""

    def __init__(self, db: AsyncSession, validator: CommentValidator | None = None):
        self.db = db
        self.validator = validator or CommentValidator(db)
        self.sessions = FormSessionService(db)
        self.pages = PageService(db)

    async def submit(
        self,
        *,
        page_id: UUID,
        form: FormDefinition,
        data: dict,
        session: FormSession,
    ) -> SubmissionResult:
        """Handle one comment form submission.

        On rejection the submitted values are written to the session under the
        form's data key so the next render can re-populate the form. On
        acceptance the comment is stored against the page and that key is
        cleared. Either way a message is left for the next render.

        Raises:
            HTTPException: 404 if the page does not exist
        """
        page = await self.pages.get(page_id)
        values = normalize_submission(form, data)
        redirect_to = f"/pages/{page.id}"

        outcome = await self.validator.validate(form, values)
        if not outcome.valid:
            await self.sessions.set(session, form_data_key(form.form_id), values)
            await self.sessions.set(
                session,
                form_message_key(form.form_id),
                {
                    "message": outcome.message,
                    "severity": outcome.severity.value,
                    "field_errors": outcome.field_errors,
                },
            )
            observe_submission(form_id=form.form_id, accepted=False, reason=outcome.reason.value)
            log_json(
                logger,
                logging.INFO,
                "comment_rejected",
                page_id=page.id,
                form_id=form.form_id,
                reason=outcome.reason.value,
                fields=sorted(outcome.field_errors),
                lengths=summarize_submission(values),
            )
            return SubmissionResult(
                accepted=False,
                message=outcome.message,
                severity=outcome.severity,
                redirect_to=redirect_to,
                field_errors=outcome.field_errors,
                reason=outcome.reason,
            )

        comment = PageComment(
            page_id=page.id,
            name=values["Name"],
            email=values["Email"],
            comment=values["Comment"],
        )
        self.db.add(comment)
        await self.db.flush()
        await self.db.refresh(comment)

        await self.sessions.clear(session, form_data_key(form.form_id))
        await self.sessions.set(
            session,
            form_message_key(form.form_id),
            {"message": SUCCESS_MESSAGE, "severity": MessageSeverity.GOOD.value, "field_errors": {}},
        )

        observe_submission(form_id=form.form_id, accepted=True, reason=None)
        log_json(
            logger,
            logging.INFO,
            "comment_created",
            page_id=page.id,
            comment_id=comment.id,
            form_id=form.form_id,
        )
        return SubmissionResult(
            accepted=True,
            message=SUCCESS_MESSAGE,
            severity=MessageSeverity.GOOD,
            redirect_to=redirect_to,
            comment=comment,
        )
