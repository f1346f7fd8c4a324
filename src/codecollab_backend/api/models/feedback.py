"""Pydantic models for feedback endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from codecollab_backend.api.models.auth import UserSummary
from codecollab_backend.shared import (
    CamelModel,
    Difficulty,
    FeedbackStatus,
    FeedbackType,
    ReportReason,
    VoteType,
)


class FeedbackSubmitRequest(CamelModel):
    question_id: UUID
    feedback_type: FeedbackType = Field(
        default=FeedbackType.DIFFICULTY_RATING, alias="type"
    )
    voted_difficulty: Difficulty | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = Field(default=None, max_length=1000)
    tags: list[str] = Field(default_factory=list)
    is_anonymous: bool = False


class FeedbackUpdateRequest(CamelModel):
    voted_difficulty: Difficulty | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = Field(default=None, max_length=1000)
    tags: list[str] | None = None
    is_anonymous: bool | None = None


class FeedbackResponse(CamelModel):
    """Feedback as shown to readers; anonymous entries carry no author."""

    id_: UUID = Field(alias="id")
    user: UserSummary | None = None
    question_id: UUID
    feedback_type: FeedbackType = Field(alias="type")
    voted_difficulty: Difficulty | None = None
    rating: int | None = None
    comment: str | None = None
    tags: list[str]
    is_anonymous: bool
    status: FeedbackStatus
    upvotes: int
    downvotes: int
    helpful_score: int
    last_modified: datetime
    created_at: datetime


class FeedbackSubmitResponse(CamelModel):
    message: str = "Feedback submitted successfully"
    feedback: FeedbackResponse


class FeedbackUpdateResponse(CamelModel):
    message: str = "Feedback updated successfully"
    feedback: FeedbackResponse


class PaginationModel(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool


class FeedbackStatisticsModel(CamelModel):
    average_rating: float | None = None
    total_feedbacks: int = 0
    difficulty_breakdown: dict[str, int] = Field(default_factory=dict)


class QuestionFeedbackResponse(CamelModel):
    feedbacks: list[FeedbackResponse]
    pagination: PaginationModel
    statistics: FeedbackStatisticsModel


class MyFeedbackResponse(CamelModel):
    feedbacks: list[FeedbackResponse]
    pagination: PaginationModel


class FeedbackVoteRequest(CamelModel):
    vote_type: VoteType


class FeedbackVoteResponse(CamelModel):
    message: str = "Vote recorded successfully"
    helpful_score: int
    upvotes: int
    downvotes: int


class FeedbackReportRequest(CamelModel):
    reason: ReportReason
    description: str | None = Field(default=None, max_length=500)
