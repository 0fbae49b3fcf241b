"""HTML rendering of a page with its comments and comment form."""

from __future__ import annotations

from html import escape as html_escape

from pagecomments.models.enums import FieldType
from pagecomments.models.page import Page
from pagecomments.models.page_comment import PageComment
from pagecomments.schemas.form import RenderedField, RenderedForm

PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{title}</title>
    <style>
      body {{ font-family: ui-sans-serif, system-ui, sans-serif; max-width: 48rem; margin: 2rem auto; }}
      .message.good {{ color: #166534; background: #dcfce7; padding: .5rem; }}
      .message.bad {{ color: #991b1b; background: #fee2e2; padding: .5rem; }}
      .field .error {{ color: #991b1b; font-size: .875rem; }}
      .comment {{ border-top: 1px solid #e5e7eb; padding: .75rem 0; }}
    </style>
  </head>
  <body>
    <article>
      <h1>{title}</h1>
      <div class="content">{content}</div>
    </article>
    <section class="comments">
      <h2>Comments ({comment_count})</h2>
{comments}
{pager}
    </section>
    <section class="comment-form">
      <h2>Post your comment</h2>
{form}
    </section>
  </body>
</html>
"""

COMMENT_TEMPLATE = """      <div class="comment">
        <p class="author">{name} <time datetime="{created_at}">{created_at}</time></p>
        <p class="body">{comment}</p>
      </div>"""


def _render_field(field: RenderedField) -> str:
    name = html_escape(field.name)
    required = " required" if field.required else ""
    maxlength = f' maxlength="{field.max_length}"' if field.max_length else ""
    if field.field_type is FieldType.TEXTAREA:
        widget = (
            f'<textarea name="{name}" id="{name}"{required}{maxlength}>'
            f"{html_escape(field.value)}</textarea>"
        )
    else:
        widget = (
            f'<input type="{field.field_type.value}" name="{name}" id="{name}" '
            f'value="{html_escape(field.value)}"{required}{maxlength} />'
        )
    error = f'<span class="error">{html_escape(field.error)}</span>' if field.error else ""
    return (
        f'        <div class="field"><label for="{name}">{html_escape(field.title)}</label>'
        f"{widget}{error}</div>"
    )


def render_form_html(form: RenderedForm) -> str:
    lines = [
        f'      <form id="{html_escape(form.form_id)}" method="post" '
        f'action="{html_escape(form.action_url)}">'
    ]
    if form.message:
        lines.append(
            f'        <p class="message {form.message.severity.value}">'
            f"{html_escape(form.message.message)}</p>"
        )
    lines.extend(_render_field(f) for f in form.fields)
    lines.extend(
        f'        <button type="submit">{html_escape(a.title)}</button>' for a in form.actions
    )
    lines.append("      </form>")
    return "\n".join(lines)


def render_comment_pager(page: Page, total: int, offset: int, limit: int) -> str:
    """Links to the previous/next slice of comments; empty when all fit."""
    links = []
    if offset > 0:
        previous = max(offset - limit, 0)
        links.append(
            f'<a rel="prev" href="/pages/{page.id}?comments_offset={previous}">'
            "Earlier comments</a>"
        )
    if offset + limit < total:
        links.append(
            f'<a rel="next" href="/pages/{page.id}?comments_offset={offset + limit}">'
            "Later comments</a>"
        )
    if not links:
        return ""
    return f'      <nav class="pager">{" ".join(links)}</nav>'


def render_page_html(
    page: Page,
    comments: list[PageComment],
    form: RenderedForm,
    *,
    total: int | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> str:
    """Fill the page template: page content, one block per comment, then the form.

    `total` is the page's full comment count; when `limit` is given and the
    comments do not all fit, paging links are added below the list.
    """
    if total is None:
        total = len(comments)
    pager = render_comment_pager(page, total, offset, limit) if limit else ""
    rendered_comments = "\n".join(
        COMMENT_TEMPLATE.format(
            name=html_escape(c.name),
            created_at=html_escape(c.created_at.isoformat() if c.created_at else ""),
            comment=html_escape(c.comment),
        )
        for c in comments
    )
    return PAGE_TEMPLATE.format(
        title=html_escape(page.title),
        content=html_escape(page.content or ""),
        comment_count=total,
        comments=rendered_comments,
        pager=pager,
        form=render_form_html(form),
    )
