"""Models for operational endpoints and generic acknowledgements."""

from __future__ import annotations

from datetime import datetime

from codecollab_backend.shared import CamelModel


class MessageResponse(CamelModel):
    """Plain acknowledgement returned by state-changing endpoints."""

    message: str


class HealthResponse(CamelModel):
    status: str = "OK"
    timestamp: datetime
    allowed_origins: int
    environment: str


class CorsInfoResponse(CamelModel):
    allowed_origins: list[str]
    request_origin: str | None = None
    environment: str
