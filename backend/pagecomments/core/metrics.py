"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

HTTP_REQUESTS_TOTAL = Counter(
    "pagecomments_http_requests_total",
    "Total number of HTTP requests.",
    ["method", "route", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "pagecomments_http_request_duration_seconds",
    "HTTP request duration in seconds.",
    ["method", "route", "status"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

COMMENT_SUBMISSIONS_TOTAL = Counter(
    "pagecomments_comment_submissions_total",
    "Comment form submissions by outcome.",
    ["form", "outcome", "reason"],
)

FORM_SESSIONS_PURGED_TOTAL = Counter(
    "pagecomments_form_sessions_purged_total",
    "Expired form sessions removed by the retention task.",
)


def observe_http_request(
    *,
    method: str,
    route: str,
    status_code: int,
    duration_ms: float,
) -> None:
    status = str(status_code)
    HTTP_REQUESTS_TOTAL.labels(method=method, route=route, status=status).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(
        method=method, route=route, status=status
    ).observe(duration_ms / 1000.0)


def observe_submission(*, form_id: str, accepted: bool, reason: str | None) -> None:
    COMMENT_SUBMISSIONS_TOTAL.labels(
        form=form_id,
        outcome="accepted" if accepted else "rejected",
        reason=reason or "none",
    ).inc()
