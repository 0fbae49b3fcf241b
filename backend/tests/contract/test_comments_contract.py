"""Contract tests for the page comment endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.models.page import Page
from tests.conftest import create_comment

DUPLICATE_BODY = "This is a twenty-five ch."


@pytest.mark.asyncio
async def test_post_comment_returns_201(client: AsyncClient, test_page: Page):
    """POST /api/pages/{id}/comments stores the comment and hides the email."""
    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"Name": "Jo", "Email": "jo@x.com", "Comment": "Nice article"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["page_id"] == str(test_page.id)
    assert data["name"] == "Jo"
    assert data["comment"] == "Nice article"
    assert "email" not in data
    assert "created_at" in data
    assert "form_session=" in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_post_comment_accepts_lowercase_keys(client: AsyncClient, test_page: Page):
    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"name": "Jo", "email": "jo@x.com", "comment": "Lowercase keys work too."},
    )

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_post_comment_missing_fields_returns_422(client: AsyncClient, test_page: Page):
    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"Name": "Jo"},
    )

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "validation_error"
    assert data["severity"] == "bad"
    assert data["message"] == "Please fill in all required fields"
    assert data["details"] == {
        "Email": "Email is required",
        "Comment": "Comment is required",
    }


@pytest.mark.asyncio
async def test_post_comment_bad_email_returns_422(client: AsyncClient, test_page: Page):
    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"Name": "Jo", "Email": "nope", "Comment": "Hello"},
    )

    assert response.status_code == 422
    assert response.json()["details"] == {"Email": "Please enter a valid email address"}


@pytest.mark.asyncio
async def test_post_duplicate_comment_returns_422(
    client: AsyncClient,
    db: AsyncSession,
    test_page: Page,
):
    await create_comment(db, test_page, DUPLICATE_BODY)
    await db.commit()

    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"Name": "Jo", "Email": "jo@x.com", "Comment": DUPLICATE_BODY},
    )

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "duplicate_comment"
    assert data["severity"] == "bad"
    assert data["details"] is None

    form = await client.get(f"/api/pages/{test_page.id}/comment-form")
    values = {f["name"]: f["value"] for f in form.json()["fields"]}
    assert values["Comment"] == DUPLICATE_BODY


@pytest.mark.asyncio
async def test_post_comment_unknown_page_returns_404(client: AsyncClient, db: AsyncSession):
    response = await client.post(
        "/api/pages/00000000-0000-0000-0000-000000000000/comments",
        json={"Name": "Jo", "Email": "jo@x.com", "Comment": "Hello"},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_post_comment_unknown_key_returns_422(client: AsyncClient, test_page: Page):
    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"Name": "Jo", "Email": "jo@x.com", "Comment": "Hello", "Website": "spam"},
    )

    assert response.status_code == 422
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_list_comments_returns_page_comments_only(
    client: AsyncClient,
    db: AsyncSession,
    test_page: Page,
    other_page: Page,
):
    await create_comment(db, test_page, "On this page")
    await create_comment(db, other_page, "On another page")
    await db.commit()

    response = await client.get(f"/api/pages/{test_page.id}/comments")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert [c["comment"] for c in data["items"]] == ["On this page"]


@pytest.mark.asyncio
async def test_list_comments_pagination(client: AsyncClient, db: AsyncSession, test_page: Page):
    for i in range(3):
        await create_comment(db, test_page, f"Comment {i}")
    await db.commit()

    response = await client.get(f"/api/pages/{test_page.id}/comments?limit=2&offset=0")

    data = response.json()
    assert data["total"] == 3
    assert data["limit"] == 2
    assert len(data["items"]) == 2


@pytest.mark.asyncio
async def test_comment_form_is_empty_for_new_visitor(client: AsyncClient, test_page: Page):
    response = await client.get(f"/api/pages/{test_page.id}/comment-form")

    assert response.status_code == 200
    data = response.json()
    assert data["form_id"] == "CommentForm"
    assert data["action_url"] == f"/pages/{test_page.id}/CommentForm/doPostComment"
    assert [f["name"] for f in data["fields"]] == ["Name", "Email", "Comment"]
    assert all(f["value"] == "" for f in data["fields"])
    assert data["message"] is None


@pytest.mark.asyncio
async def test_comment_form_does_not_consume_message(client: AsyncClient, test_page: Page):
    await client.post(f"/api/pages/{test_page.id}/comments", json={"Name": "Jo"})

    first = (await client.get(f"/api/pages/{test_page.id}/comment-form")).json()
    second = (await client.get(f"/api/pages/{test_page.id}/comment-form")).json()

    assert first["message"]["severity"] == "bad"
    assert second == first


@pytest.mark.asyncio
async def test_post_comment_null_and_non_string_values_use_form_rules(
    client: AsyncClient,
    test_page: Page,
):
    """Null or non-string values are treated as empty and rejected by the form rules."""
    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"Name": None, "Email": "jo@x.com", "Comment": 42, "Website": "http://x"},
    )

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "validation_error"
    assert data["severity"] == "bad"
    assert data["message"] == "Please fill in all required fields"
    assert data["details"] == {
        "Name": "Name is required",
        "Comment": "Comment is required",
    }
    assert "form_session=" in response.headers["set-cookie"]

    form = await client.get(f"/api/pages/{test_page.id}/comment-form")
    values = {f["name"]: f["value"] for f in form.json()["fields"]}
    assert values == {"Name": "", "Email": "jo@x.com", "Comment": ""}


@pytest.mark.asyncio
async def test_post_comment_ignores_unknown_keys(client: AsyncClient, test_page: Page):
    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"Name": "Jo", "Email": "jo@x.com", "Comment": "Hello there", "extra": True},
    )

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_post_comment_too_long_returns_error_body(client: AsyncClient, test_page: Page):
    response = await client.post(
        f"/api/pages/{test_page.id}/comments",
        json={"Name": "Jo", "Email": "jo@x.com", "Comment": "x" * 2001},
    )

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "validation_error"
    assert data["details"] == {"Comment": "Comment must be at most 2000 characters"}
    assert "form_session=" in response.headers["set-cookie"]
