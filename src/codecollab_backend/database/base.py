"""Declarative base and column helpers for SQLAlchemy models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import DateTime, Enum
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from codecollab_backend.shared import as_utc


class BaseSchema(DeclarativeBase):
    """Base class for all SQLAlchemy schemas."""

    pass


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware timestamp that always round-trips as UTC.

    SQLite drops offsets on storage, so values coming back are re-tagged.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is None:
            return None
        return as_utc(value)

    def process_result_value(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is None:
            return None
        return as_utc(value)


def enum_column(enum_cls: type[StrEnum], name: str, **kwargs: Any) -> Enum:
    """Build an Enum column type persisting member values rather than names."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
        **kwargs,
    )
