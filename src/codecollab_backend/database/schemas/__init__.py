"""SQLAlchemy schemas persisted by the backend."""

from codecollab_backend.database.schemas.feedback import (
    FeedbackReportSchema,
    FeedbackSchema,
    FeedbackVoteSchema,
)
from codecollab_backend.database.schemas.group import (
    DEFAULT_GROUP_SETTINGS,
    DEFAULT_MEMBER_PERMISSIONS,
    GroupMemberSchema,
    GroupSchema,
)
from codecollab_backend.database.schemas.question import (
    DifficultyRatingSchema,
    MemberResponseSchema,
    QuestionLikeSchema,
    QuestionSchema,
    SolutionSchema,
)
from codecollab_backend.database.schemas.user import UserSchema

__all__ = [
    "DEFAULT_GROUP_SETTINGS",
    "DEFAULT_MEMBER_PERMISSIONS",
    "DifficultyRatingSchema",
    "FeedbackReportSchema",
    "FeedbackSchema",
    "FeedbackVoteSchema",
    "GroupMemberSchema",
    "GroupSchema",
    "MemberResponseSchema",
    "QuestionLikeSchema",
    "QuestionSchema",
    "SolutionSchema",
    "UserSchema",
]
