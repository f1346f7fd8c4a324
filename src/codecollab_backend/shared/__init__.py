"""Shared utilities, shared models and cross-cutting helpers for the backend."""

from codecollab_backend.shared.clock import as_utc, round_half_up, utc_now
from codecollab_backend.shared.enums import (
    Difficulty,
    FeedbackStatus,
    FeedbackType,
    GroupCategory,
    MemberRole,
    MemberStatus,
    Platform,
    QuestionStatus,
    ReportReason,
    ResponseStatus,
    UserRole,
    VoteType,
)
from codecollab_backend.shared.models import CamelModel

__all__ = [
    "CamelModel",
    "Difficulty",
    "FeedbackStatus",
    "FeedbackType",
    "GroupCategory",
    "MemberRole",
    "MemberStatus",
    "Platform",
    "QuestionStatus",
    "ReportReason",
    "ResponseStatus",
    "UserRole",
    "VoteType",
    "as_utc",
    "round_half_up",
    "utc_now",
]
