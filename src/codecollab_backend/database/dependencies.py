"""Request-scoped database dependencies."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from codecollab_backend.database.service import DatabaseService


def get_database(request: Request) -> DatabaseService:
    """Return the :class:`DatabaseService` attached to the running application.

    The service is built from settings on first use and kept on ``app.state``.
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        database = DatabaseService()
        request.app.state.database = database
    return database


def get_session(database: DatabaseService = Depends(get_database)) -> Iterator[Session]:
    """Yield a session that commits once the endpoint returns."""
    with database.session() as session:
        yield session
