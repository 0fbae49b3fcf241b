"""Middleware for security headers, rate limiting and request logging."""

import logging
import re
import time
from collections import defaultdict
from datetime import UTC, datetime, timedelta

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from pagecomments.core.config import get_settings
from pagecomments.core.metrics import observe_http_request
from pagecomments.core.request_context import new_request_id, request_id_context
from pagecomments.core.structured_logging import log_json

logger = logging.getLogger(__name__)
settings = get_settings()

# Form posts (/pages/{id}/{form}/{action}) and JSON comment posts
_SUBMISSION_PATHS = (
    re.compile(r"^/pages/[^/]+/[^/]+/[^/]+/?$"),
    re.compile(r"^/api/pages/[^/]+/comments/?$"),
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add basic security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "same-origin")

        if settings.environment == "production":
            forwarded_proto = request.headers.get("x-forwarded-proto")
            scheme = forwarded_proto or request.url.scheme
            if scheme == "https":
                response.headers.setdefault(
                    "Strict-Transport-Security",
                    "max-age=63072000; includeSubDomains",
                )

        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP limit on comment submissions (production only).

    Limit: RATE_LIMIT_COMMENT_POSTS_PER_MINUTE submissions per client IP.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        # Storage: {identifier: [timestamp, ...]}
        self._requests: dict[str, list[datetime]] = defaultdict(list)

    def _count_recent(self, identifier: str, window: timedelta) -> int:
        cutoff = datetime.now(UTC) - window
        recent = [ts for ts in self._requests.get(identifier, []) if ts > cutoff]
        if not recent:
            self._requests.pop(identifier, None)
            return 0
        self._requests[identifier] = recent
        return len(recent)

    @staticmethod
    def _is_submission(request: Request) -> bool:
        if request.method != "POST":
            return False
        return any(p.match(request.url.path) for p in _SUBMISSION_PATHS)

    async def dispatch(self, request: Request, call_next):
        if settings.environment != "production" or not self._is_submission(request):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        count = self._count_recent(client_ip, timedelta(minutes=1))
        if count >= settings.rate_limit_comment_posts_per_minute:
            log_json(logger, logging.WARNING, "rate_limited", path=request.url.path, client_ip=client_ip)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Too many comment submissions. Please try again later."},
            )
        self._requests[client_ip].append(datetime.now(UTC))

        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Structured request log: method, path, status, duration, client IP."""

    async def dispatch(self, request: Request, call_next):
        incoming_request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
        )
        request_id = None
        if incoming_request_id:
            candidate = incoming_request_id.strip()
            if candidate and len(candidate) <= 128 and "\n" not in candidate and "\r" not in candidate:
                request_id = candidate

        if not request_id:
            request_id = new_request_id()

        request.state.request_id = request_id

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        with request_id_context(request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start_time) * 1000
                log_json(
                    logger,
                    logging.ERROR,
                    "request_error",
                    method=method,
                    path=path,
                    status_code=500,
                    duration_ms=round(duration_ms, 2),
                    client_ip=client_ip,
                    error=str(exc),
                    exception=exc.__class__.__name__,
                )
                raise

            response.headers.setdefault("X-Request-ID", request_id)
            duration_ms = (time.perf_counter() - start_time) * 1000

            route_obj = request.scope.get("route")
            route_template = getattr(route_obj, "path", None) if route_obj else None
            if not route_template:
                route_template = "unmatched"

            observe_http_request(
                method=method,
                route=route_template,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

            if response.status_code >= 500:
                level = logging.ERROR
            elif response.status_code >= 400:
                level = logging.WARNING
            else:
                level = logging.INFO

            log_json(
                logger,
                level,
                "request",
                method=method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                client_ip=client_ip,
            )

            return response
