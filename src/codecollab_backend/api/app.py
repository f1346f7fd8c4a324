"""Factory for constructing the FastAPI application."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from codecollab_backend.api.rate_limit import InMemoryRateLimiter, rate_limit
from codecollab_backend.api.routers import (
    auth_router,
    feedback_router,
    groups_router,
    questions_router,
    system_router,
)
from codecollab_backend.api.services import ServiceError
from codecollab_backend.logging_config import configure_logging
from codecollab_backend.settings import BackendSettings, get_settings

logger = logging.getLogger("codecollab_backend.api")


def _install_error_handlers(app: FastAPI, config: BackendSettings) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"detail": "Something went wrong!"}
        if not config.is_production:
            content["error"] = str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content
        )


def _install_access_log(app: FastAPI) -> None:
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
        request.state.request_id = request_id
        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
            logger.info(
                "%s %s %s %.2fms",
                request.method,
                request.url.path,
                status_code,
                elapsed_ms,
            )


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    database = getattr(app.state, "database", None)
    if database is not None:
        database.engine.dispose()


def create_api(settings: BackendSettings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    config = settings or get_settings()
    configure_logging(config.log_level)

    app = FastAPI(title="CodeCollab API", lifespan=_lifespan)
    app.state.rate_limiter = InMemoryRateLimiter()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
        expose_headers=["X-Total-Count"],
    )
    _install_access_log(app)
    _install_error_handlers(app, config)

    api_limit = [Depends(rate_limit("api"))]
    app.include_router(system_router)
    app.include_router(auth_router, dependencies=api_limit)
    app.include_router(groups_router, dependencies=api_limit)
    app.include_router(questions_router, dependencies=api_limit)
    app.include_router(feedback_router, dependencies=api_limit)
    logger.info(
        "API configured for %s with %d allowed origins",
        config.environment,
        len(config.allowed_origins),
    )
    return app
