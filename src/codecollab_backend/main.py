"""CodeCollab API entrypoint."""

from __future__ import annotations

import logging

import uvicorn

from codecollab_backend.settings import get_settings

logger = logging.getLogger(__name__)


def _run_uvicorn(*, reload: bool) -> None:
    """Serve the application factory with the configured bind address."""
    config = get_settings()
    logger.info(
        "Starting CodeCollab API on %s:%d (%s)",
        config.api_host,
        config.api_port,
        config.environment,
    )
    uvicorn.run(
        "codecollab_backend.api:create_api",
        factory=True,
        host=config.api_host,
        port=config.api_port,
        reload=reload,
        log_level=config.log_level.lower(),
        proxy_headers=not reload,
    )


def run_dev() -> None:
    """Run the development server with auto-reload."""
    _run_uvicorn(reload=True)


def run_prod() -> None:
    """Run the production server behind a proxy."""
    _run_uvicorn(reload=False)
