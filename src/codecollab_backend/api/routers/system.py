"""Operational endpoints: health and CORS diagnostics."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from codecollab_backend.api.models import CorsInfoResponse, HealthResponse
from codecollab_backend.api.rate_limit import rate_limit
from codecollab_backend.settings import get_settings
from codecollab_backend.shared import utc_now

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    config = get_settings()
    return HealthResponse(
        timestamp=utc_now(),
        allowed_origins=len(config.allowed_origins),
        environment=config.environment,
    )


@router.get(
    "/api/cors-info",
    response_model=CorsInfoResponse,
    dependencies=[Depends(rate_limit("api"))],
)
def cors_info(request: Request) -> CorsInfoResponse:
    """Echo the configured origins next to the caller's Origin header."""
    config = get_settings()
    return CorsInfoResponse(
        allowed_origins=config.allowed_origins,
        request_origin=request.headers.get("origin"),
        environment=config.environment,
    )
