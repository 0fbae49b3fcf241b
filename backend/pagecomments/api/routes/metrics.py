"""Prometheus metrics endpoint."""

from __future__ import annotations

import hmac
import os

from fastapi import APIRouter, Header, HTTPException, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from pagecomments.core.config import get_settings

router = APIRouter()


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@router.get("/metrics", include_in_schema=False, summary="Prometheus metrics")
async def metrics_endpoint(
    authorization: str | None = Header(default=None),
    x_metrics_token: str | None = Header(default=None, alias="X-Metrics-Token"),
) -> Response:
    """Expose submission and HTTP metrics.

    In production the endpoint is hidden unless METRICS_TOKEN is set, and then
    requires that token as a bearer token or X-Metrics-Token header.
    """
    if get_settings().environment == "production":
        expected = os.getenv("METRICS_TOKEN")
        if not expected:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

        token = _bearer_token(authorization) or x_metrics_token
        if not token or not hmac.compare_digest(token.encode(), expected.encode()):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
