"""Repositories wrapping SQLAlchemy queries per aggregate."""

from codecollab_backend.database.repositories.feedback import (
    FeedbackRepository,
    FeedbackSort,
    SortOrder,
)
from codecollab_backend.database.repositories.group import (
    GroupRepository,
    MembershipRepository,
)
from codecollab_backend.database.repositories.question import (
    QuestionRepository,
    QuestionSort,
)
from codecollab_backend.database.repositories.user import UserRepository

__all__ = [
    "FeedbackRepository",
    "FeedbackSort",
    "GroupRepository",
    "MembershipRepository",
    "QuestionRepository",
    "QuestionSort",
    "SortOrder",
    "UserRepository",
]
