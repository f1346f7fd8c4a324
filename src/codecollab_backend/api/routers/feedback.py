"""Feedback endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from codecollab_backend.api.dependencies import get_current_user, get_feedback_service
from codecollab_backend.api.models import (
    FeedbackReportRequest,
    FeedbackResponse,
    FeedbackStatisticsModel,
    FeedbackSubmitRequest,
    FeedbackSubmitResponse,
    FeedbackUpdateRequest,
    FeedbackUpdateResponse,
    FeedbackVoteRequest,
    FeedbackVoteResponse,
    MessageResponse,
    MyFeedbackResponse,
    PaginationModel,
    QuestionFeedbackResponse,
)
from codecollab_backend.api.rate_limit import rate_limit
from codecollab_backend.api.services import FeedbackPage, FeedbackService
from codecollab_backend.database import FeedbackSchema, UserSchema
from codecollab_backend.database.repositories import FeedbackSort, SortOrder
from codecollab_backend.shared import FeedbackType

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


def _feedback_model(feedback: FeedbackSchema, *, viewer: UserSchema) -> FeedbackResponse:
    model = FeedbackResponse.model_validate(feedback)
    if feedback.is_anonymous and feedback.user_id != viewer.id:
        model = model.model_copy(update={"user": None})
    return model


def _pagination(result: FeedbackPage) -> PaginationModel:
    return PaginationModel(
        current_page=result.page,
        total_pages=result.total_pages,
        total_items=result.total,
        has_next=result.page < result.total_pages,
        has_prev=result.page > 1,
    )


@router.post(
    "/submit",
    response_model=FeedbackSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("feedback"))],
)
def submit_feedback(
    payload: FeedbackSubmitRequest,
    user: UserSchema = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackSubmitResponse:
    feedback = service.submit(
        user,
        question_id=payload.question_id,
        feedback_type=payload.feedback_type,
        voted_difficulty=payload.voted_difficulty,
        rating=payload.rating,
        comment=payload.comment,
        tags=payload.tags,
        is_anonymous=payload.is_anonymous,
    )
    return FeedbackSubmitResponse(feedback=_feedback_model(feedback, viewer=user))


@router.get("/question/{question_id}", response_model=QuestionFeedbackResponse)
def question_feedback(
    question_id: UUID,
    feedback_type: FeedbackType | None = Query(default=None, alias="type"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: FeedbackSort = Query(default="createdAt", alias="sortBy"),
    sort_order: SortOrder = Query(default="desc", alias="sortOrder"),
    user: UserSchema = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> QuestionFeedbackResponse:
    """List active feedback on a question with aggregate rating statistics."""

    result = service.question_feedback(
        user,
        question_id,
        feedback_type=feedback_type,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    statistics = result.statistics
    return QuestionFeedbackResponse(
        feedbacks=[_feedback_model(entry, viewer=user) for entry in result.feedback],
        pagination=_pagination(result),
        statistics=FeedbackStatisticsModel(
            average_rating=statistics.average_rating,
            total_feedbacks=statistics.total_feedbacks,
            difficulty_breakdown=statistics.difficulty_breakdown,
        ),
    )


@router.get("/my-feedback", response_model=MyFeedbackResponse)
def my_feedback(
    feedback_type: FeedbackType | None = Query(default=None, alias="type"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    user: UserSchema = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> MyFeedbackResponse:
    result = service.my_feedback(
        user, feedback_type=feedback_type, page=page, limit=limit
    )
    return MyFeedbackResponse(
        feedbacks=[_feedback_model(entry, viewer=user) for entry in result.feedback],
        pagination=_pagination(result),
    )


@router.put("/{feedback_id}", response_model=FeedbackUpdateResponse)
def update_feedback(
    feedback_id: UUID,
    payload: FeedbackUpdateRequest,
    user: UserSchema = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackUpdateResponse:
    feedback = service.update(user, feedback_id, payload.model_dump(exclude_unset=True))
    return FeedbackUpdateResponse(feedback=_feedback_model(feedback, viewer=user))


@router.delete("/{feedback_id}", response_model=MessageResponse)
def delete_feedback(
    feedback_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> MessageResponse:
    service.delete(user, feedback_id)
    return MessageResponse(message="Feedback deleted successfully")


@router.post(
    "/{feedback_id}/vote",
    response_model=FeedbackVoteResponse,
    dependencies=[Depends(rate_limit("vote"))],
)
def vote_feedback(
    feedback_id: UUID,
    payload: FeedbackVoteRequest,
    user: UserSchema = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackVoteResponse:
    feedback = service.vote(user, feedback_id, payload.vote_type)
    return FeedbackVoteResponse(
        helpful_score=feedback.helpful_score,
        upvotes=feedback.upvotes,
        downvotes=feedback.downvotes,
    )


@router.post(
    "/{feedback_id}/report",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("report"))],
)
def report_feedback(
    feedback_id: UUID,
    payload: FeedbackReportRequest,
    user: UserSchema = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
) -> MessageResponse:
    service.report(user, feedback_id, payload.reason, payload.description)
    return MessageResponse(message="Feedback reported successfully")
