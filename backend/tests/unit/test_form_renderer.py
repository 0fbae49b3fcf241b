"""Unit tests for building the rendered comment form."""

from uuid import uuid4

from pagecomments.core.forms import build_comment_form
from pagecomments.models.enums import MessageSeverity
from pagecomments.services.form_renderer import build_rendered_form


def test_renders_empty_fields_without_saved_state():
    page_id = uuid4()
    rendered = build_rendered_form(build_comment_form(), page_id)

    assert rendered.form_id == "CommentForm"
    assert rendered.action_url == f"/pages/{page_id}/CommentForm/doPostComment"
    assert [f.name for f in rendered.fields] == ["Name", "Email", "Comment"]
    assert all(f.value == "" for f in rendered.fields)
    assert all(f.required for f in rendered.fields)
    assert rendered.message is None
    assert [a.title for a in rendered.actions] == ["Post"]


def test_prepopulates_from_saved_data():
    rendered = build_rendered_form(
        build_comment_form(),
        uuid4(),
        saved_data={"Name": "Jo", "Email": "jo@x.com", "Comment": "Hello"},
    )

    assert {f.name: f.value for f in rendered.fields} == {
        "Name": "Jo",
        "Email": "jo@x.com",
        "Comment": "Hello",
    }


def test_attaches_message_and_field_errors():
    rendered = build_rendered_form(
        build_comment_form(),
        uuid4(),
        saved_data={"Name": "", "Email": "jo@x.com", "Comment": "Hello"},
        saved_message={
            "message": "Please fill in all required fields",
            "severity": "bad",
            "field_errors": {"Name": "Name is required"},
        },
    )

    assert rendered.message.severity is MessageSeverity.BAD
    errors = {f.name: f.error for f in rendered.fields}
    assert errors == {"Name": "Name is required", "Email": None, "Comment": None}


def test_each_render_builds_fresh_fields():
    form = build_comment_form()
    first = build_rendered_form(form, uuid4(), saved_data={"Name": "Jo"})
    second = build_rendered_form(form, uuid4())

    assert first.fields[0].value == "Jo"
    assert second.fields[0].value == ""
