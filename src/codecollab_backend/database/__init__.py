"""Database connectivity helpers and configuration objects."""

from codecollab_backend.database.base import BaseSchema
from codecollab_backend.database.dependencies import get_database, get_session
from codecollab_backend.database.repositories import (
    FeedbackRepository,
    GroupRepository,
    MembershipRepository,
    QuestionRepository,
    UserRepository,
)
from codecollab_backend.database.schemas import (
    FeedbackSchema,
    GroupMemberSchema,
    GroupSchema,
    MemberResponseSchema,
    QuestionSchema,
    UserSchema,
)
from codecollab_backend.database.service import DatabaseService
from codecollab_backend.settings import BackendSettings, get_settings

__all__ = [
    "BackendSettings",
    "BaseSchema",
    "DatabaseService",
    "FeedbackRepository",
    "FeedbackSchema",
    "GroupMemberSchema",
    "GroupRepository",
    "GroupSchema",
    "MemberResponseSchema",
    "MembershipRepository",
    "QuestionRepository",
    "QuestionSchema",
    "UserRepository",
    "UserSchema",
    "get_database",
    "get_session",
    "get_settings",
]
