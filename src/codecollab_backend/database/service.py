"""Database session management utilities."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from codecollab_backend.database.base import BaseSchema
from codecollab_backend.settings import BackendSettings, get_settings


def _engine_options(url: str) -> dict[str, Any]:
    """Return driver specific engine arguments for *url*."""
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url.rstrip("/").endswith("sqlite:"):
        # A single shared connection keeps the in-memory database alive.
        options["poolclass"] = StaticPool
    return options


class DatabaseService:
    """Wraps SQLAlchemy engine and session factory."""

    def __init__(
        self,
        url: str | None = None,
        *,
        settings: BackendSettings | None = None,
    ) -> None:
        if url is None:
            url = (settings or get_settings()).database_url
        self._engine = create_engine(url, future=True, **_engine_options(url))
        self._session_factory = sessionmaker(
            bind=self._engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            class_=Session,
        )

    @property
    def engine(self) -> Engine:
        """Expose the SQLAlchemy engine."""

        return self._engine

    def create_all(self) -> None:
        """Create every table known to :class:`BaseSchema` (used by tests and dev setups)."""
        BaseSchema.metadata.create_all(self._engine)

    def drop_all(self) -> None:
        BaseSchema.metadata.drop_all(self._engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a transactional session scope."""

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
