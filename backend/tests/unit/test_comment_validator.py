"""Unit tests for comment form validation rules."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.core.forms import build_comment_form
from pagecomments.models.enums import MessageSeverity, RejectionReason
from pagecomments.models.page import Page
from pagecomments.models.page_comment import PageComment
from pagecomments.services.comment_validator import (
    DUPLICATE_MESSAGE,
    REQUIRED_MESSAGE,
    CommentValidator,
    check_field_values,
    check_required,
    normalize_submission,
)
from tests.conftest import create_comment

VALID = {"Name": "Jo", "Email": "jo@x.com", "Comment": "Nice article"}


class TestNormalizeSubmission:
    def test_strips_values_and_drops_unknown_fields(self):
        form = build_comment_form()
        cleaned = normalize_submission(
            form,
            {"Name": "  Jo ", "Email": "jo@x.com\n", "Comment": " hi ", "SecurityID": "x"},
        )

        assert cleaned == {"Name": "Jo", "Email": "jo@x.com", "Comment": "hi"}

    def test_missing_and_non_string_values_become_empty(self):
        form = build_comment_form()
        cleaned = normalize_submission(form, {"Name": None, "Comment": 42})

        assert cleaned == {"Name": "", "Email": "", "Comment": ""}


class TestCheckRequired:
    def test_reports_each_missing_field(self):
        errors = check_required(build_comment_form(), {"Name": "Jo", "Email": "", "Comment": ""})

        assert errors == {"Email": "Email is required", "Comment": "Comment is required"}

    def test_complete_submission_has_no_errors(self):
        assert check_required(build_comment_form(), VALID) == {}


class TestCheckFieldValues:
    def test_rejects_malformed_email(self):
        errors = check_field_values(build_comment_form(), {**VALID, "Email": "not-an-email"})

        assert errors == {"Email": "Please enter a valid email address"}

    def test_rejects_overlong_name(self):
        errors = check_field_values(build_comment_form(), {**VALID, "Name": "x" * 256})

        assert set(errors) == {"Name"}

    def test_skips_empty_values(self):
        assert check_field_values(build_comment_form(), {"Name": "", "Email": "", "Comment": ""}) == {}


@pytest.mark.asyncio
async def test_missing_required_field_rejected(db: AsyncSession):
    validator = CommentValidator(db)

    result = await validator.validate(build_comment_form(), {**VALID, "Name": ""})

    assert result.valid is False
    assert result.reason is RejectionReason.REQUIRED
    assert result.severity is MessageSeverity.BAD
    assert result.message == REQUIRED_MESSAGE
    assert result.field_errors == {"Name": "Name is required"}


@pytest.mark.asyncio
async def test_long_duplicate_rejected(db: AsyncSession, test_page: Page):
    body = "This is a twenty-five ch."
    assert len(body) == 25
    await create_comment(db, test_page, body)

    result = await CommentValidator(db).validate(build_comment_form(), {**VALID, "Comment": body})

    assert result.valid is False
    assert result.reason is RejectionReason.DUPLICATE
    assert result.severity is MessageSeverity.BAD
    assert result.message == DUPLICATE_MESSAGE
    assert result.field_errors == {}


@pytest.mark.asyncio
async def test_short_duplicate_accepted(db: AsyncSession, test_page: Page):
    await create_comment(db, test_page, "Nice article")

    result = await CommentValidator(db).validate(build_comment_form(), VALID)

    assert result.valid is True
    assert result.message is None


@pytest.mark.asyncio
async def test_duplicate_exactly_at_threshold_accepted(db: AsyncSession, test_page: Page):
    body = "a" * 20
    await create_comment(db, test_page, body)

    result = await CommentValidator(db).validate(build_comment_form(), {**VALID, "Comment": body})

    assert result.valid is True


@pytest.mark.asyncio
async def test_threshold_is_configurable(db: AsyncSession, test_page: Page):
    await create_comment(db, test_page, "Nice article")

    result = await CommentValidator(db, duplicate_min_length=5).validate(
        build_comment_form(), VALID
    )

    assert result.valid is False
    assert result.reason is RejectionReason.DUPLICATE


@pytest.mark.asyncio
async def test_unique_long_comment_accepted(db: AsyncSession, test_page: Page):
    await create_comment(db, test_page, "Something else entirely, and long enough.")

    result = await CommentValidator(db).validate(
        build_comment_form(),
        {**VALID, "Comment": "A brand new thought that nobody has posted."},
    )

    assert result.valid is True


def test_duplicate_lookup_is_backed_by_comment_hash_index():
    index = next(
        i for i in PageComment.__table__.indexes if i.name == "idx_page_comments_comment_hash"
    )

    assert [c.name for c in index.columns] == ["comment"]
    assert index.dialect_options["postgresql"]["using"] == "hash"


@pytest.mark.asyncio
async def test_is_duplicate_matches_exact_body_only(db: AsyncSession, test_page: Page):
    await create_comment(db, test_page, "An exact body that is long enough")
    validator = CommentValidator(db)

    assert await validator.is_duplicate("An exact body that is long enough") is True
    assert await validator.is_duplicate("An exact body that is long enough!") is False
