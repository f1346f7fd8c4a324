"""Time helpers shared by persistence and services."""

from __future__ import annotations

import math
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values and normalise aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def round_half_up(value: float) -> int:
    """Round halves upwards instead of to the nearest even integer."""
    return math.floor(value + 0.5)
