"""Pydantic models for question, solution and member response endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from codecollab_backend.api.models.auth import UserSummary
from codecollab_backend.shared import (
    CamelModel,
    Difficulty,
    Platform,
    QuestionStatus,
    ResponseStatus,
)
from codecollab_backend.stats import QuestionStats


class QuestionCreateRequest(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    source_url: str = Field(min_length=1, max_length=2048)
    difficulty: Difficulty
    category: str = Field(min_length=1, max_length=100)
    tags: list[str] = Field(default_factory=list)
    platform: Platform
    group_id: UUID


class QuestionUpdateRequest(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    difficulty: Difficulty | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    tags: list[str] | None = None


class QuestionResponse(CamelModel):
    """Public representation of a posted question."""

    id_: UUID = Field(alias="id")
    title: str
    description: str | None = None
    source_url: str
    difficulty: Difficulty
    category: str
    tags: list[str]
    platform: Platform
    group_id: UUID
    posted_by: UserSummary = Field(
        validation_alias="poster", serialization_alias="postedBy"
    )
    views: int
    like_count: int
    status: QuestionStatus
    created_at: datetime
    updated_at: datetime


class MemberResponseModel(CamelModel):
    """A member's logged outcome for a question."""

    id_: UUID = Field(alias="id")
    user: UserSummary
    status: ResponseStatus
    difficulty_rating: Difficulty
    time_to_solve: int | None = None
    notes: str = ""
    submitted_at: datetime


class QuestionListItem(QuestionResponse):
    solved_count: int = 0
    attempted_count: int = 0
    total_responses: int = 0
    user_response: MemberResponseModel | None = None
    member_difficulty_rating: Difficulty | None = None


class QuestionListResponse(CamelModel):
    questions: list[QuestionListItem]
    total_questions: int
    total_pages: int
    current_page: int


class QuestionDetailResponse(QuestionResponse):
    liked: bool = False
    user_rating: Difficulty | None = None
    user_response: MemberResponseModel | None = None
    stats: QuestionStats


class QuestionViewResponse(CamelModel):
    question: QuestionDetailResponse


class QuestionCollectionResponse(CamelModel):
    questions: list[QuestionResponse]


class QuestionCreateResponse(CamelModel):
    message: str = "Question added successfully"
    question: QuestionResponse


class QuestionUpdateResponse(CamelModel):
    message: str = "Question updated successfully"
    question: QuestionResponse


class DifficultyRateRequest(CamelModel):
    rating: Difficulty


class LikeToggleResponse(CamelModel):
    message: str
    liked: bool
    like_count: int


class SolutionCreateRequest(CamelModel):
    code: str = Field(min_length=1, max_length=20_000)
    language: str = Field(min_length=1, max_length=50)
    explanation: str | None = Field(default=None, max_length=5000)
    time_complexity: str | None = Field(default=None, max_length=50)
    space_complexity: str | None = Field(default=None, max_length=50)


class SolutionResponse(CamelModel):
    id_: UUID = Field(alias="id")
    user: UserSummary
    code: str
    language: str
    explanation: str | None = None
    time_complexity: str | None = None
    space_complexity: str | None = None
    created_at: datetime


class SolutionListResponse(CamelModel):
    solutions: list[SolutionResponse]


class SolutionCreateResponse(CamelModel):
    message: str = "Solution added successfully"
    solution: SolutionResponse


class ResponseSubmitRequest(CamelModel):
    status: ResponseStatus
    difficulty_rating: Difficulty
    time_to_solve: int | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=500)


class ResponseSubmitResponse(CamelModel):
    message: str
    response: MemberResponseModel
    question_stats: QuestionStats


class UserResponseResult(CamelModel):
    response: MemberResponseModel | None = None
    question_stats: QuestionStats


class QuestionBrief(CamelModel):
    id_: UUID = Field(alias="id")
    title: str
    difficulty: Difficulty


class GroupedResponses(CamelModel):
    solved: list[MemberResponseModel] = Field(default_factory=list)
    attempted: list[MemberResponseModel] = Field(default_factory=list)
    stuck: list[MemberResponseModel] = Field(default_factory=list)


class MemberResponsesResult(CamelModel):
    """All member responses for a question bucketed by outcome."""

    question: QuestionBrief
    responses: GroupedResponses
    stats: QuestionStats
