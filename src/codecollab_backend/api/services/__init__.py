"""Service layer for API-specific business logic."""

from codecollab_backend.api.services.auth import AuthService, TokenPayload
from codecollab_backend.api.services.errors import (
    BadRequestError,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    UserAlreadyExistsError,
)
from codecollab_backend.api.services.feedback import (
    FeedbackPage,
    FeedbackService,
    FeedbackStatistics,
)
from codecollab_backend.api.services.groups import (
    GroupService,
    MemberEntry,
    UserGroupEntry,
)
from codecollab_backend.api.services.questions import (
    QuestionPage,
    QuestionService,
    ResponseBreakdown,
)

__all__ = [
    "AuthService",
    "BadRequestError",
    "ConflictError",
    "FeedbackPage",
    "FeedbackService",
    "FeedbackStatistics",
    "GroupService",
    "InvalidCredentialsError",
    "MemberEntry",
    "NotFoundError",
    "PermissionDeniedError",
    "QuestionPage",
    "QuestionService",
    "ResponseBreakdown",
    "ServiceError",
    "TokenPayload",
    "UserAlreadyExistsError",
    "UserGroupEntry",
]
