"""Feedback on questions together with helpfulness votes and abuse reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from codecollab_backend.api.services.access import GroupAccess
from codecollab_backend.api.services.errors import (
    BadRequestError,
    NotFoundError,
    PermissionDeniedError,
)
from codecollab_backend.database import FeedbackSchema, UserSchema
from codecollab_backend.database.repositories import (
    FeedbackRepository,
    FeedbackSort,
    SortOrder,
)
from codecollab_backend.database.schemas import (
    FeedbackReportSchema,
    FeedbackVoteSchema,
)
from codecollab_backend.shared import (
    Difficulty,
    FeedbackStatus,
    FeedbackType,
    ReportReason,
    VoteType,
    as_utc,
    utc_now,
)

logger = logging.getLogger(__name__)

EDIT_WINDOW = timedelta(hours=24)
REPORT_THRESHOLD = 3
MAX_TAG_LENGTH = 30
_REVIEW_TYPES = (FeedbackType.QUESTION_REVIEW, FeedbackType.SOLUTION_REVIEW)


@dataclass(slots=True)
class FeedbackStatistics:
    average_rating: float | None = None
    total_feedbacks: int = 0
    difficulty_breakdown: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class FeedbackPage:
    feedback: list[FeedbackSchema]
    total: int
    page: int
    limit: int
    statistics: FeedbackStatistics | None = None

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


def normalize_feedback_tags(tags: list[str] | None) -> list[str]:
    normalized = [tag.strip().lower() for tag in tags or [] if tag.strip()]
    if any(len(tag) > MAX_TAG_LENGTH for tag in normalized):
        msg = f"Tags must be at most {MAX_TAG_LENGTH} characters"
        raise BadRequestError(msg)
    return normalized


def _validate(
    feedback_type: FeedbackType,
    voted_difficulty: Difficulty | None,
    rating: int | None,
) -> None:
    if feedback_type == FeedbackType.DIFFICULTY_RATING and voted_difficulty is None:
        raise BadRequestError("Voted difficulty is required for difficulty ratings")
    if feedback_type in _REVIEW_TYPES and (rating is None or not 1 <= rating <= 5):
        raise BadRequestError("Rating between 1 and 5 is required for reviews")


class FeedbackService:
    """Implements the feedback endpoints on top of the repositories."""

    def __init__(self, session: Session) -> None:
        self._access = GroupAccess(session)
        self._feedback = FeedbackRepository(session)

    def submit(
        self,
        user: UserSchema,
        *,
        question_id: UUID,
        feedback_type: FeedbackType = FeedbackType.DIFFICULTY_RATING,
        voted_difficulty: Difficulty | None = None,
        rating: int | None = None,
        comment: str | None = None,
        tags: list[str] | None = None,
        is_anonymous: bool = False,
    ) -> FeedbackSchema:
        question, _ = self._access.visible_question(user.id, question_id)
        _validate(feedback_type, voted_difficulty, rating)

        existing = self._feedback.find(user.id, question.id, feedback_type)
        if existing is not None and existing.status != FeedbackStatus.DELETED:
            raise BadRequestError("You have already submitted this type of feedback")

        values = {
            "voted_difficulty": voted_difficulty,
            "rating": rating,
            "comment": comment.strip() if comment else comment,
            "tags": normalize_feedback_tags(tags),
            "is_anonymous": is_anonymous,
        }
        if existing is None:
            feedback = self._feedback.add(
                FeedbackSchema(
                    user_id=user.id,
                    question_id=question.id,
                    type=feedback_type,
                    **values,
                )
            )
        else:
            # The unique (user, question, type) row is revived instead of duplicated.
            feedback = existing
            for name, value in values.items():
                setattr(feedback, name, value)
            feedback.status = FeedbackStatus.ACTIVE
            feedback.votes.clear()
            feedback.reports.clear()
            feedback.created_at = utc_now()
            self._feedback.save(feedback)
        logger.info(
            "User %s left %s feedback on question %s",
            user.id,
            feedback_type.value,
            question.id,
        )
        return feedback

    def question_feedback(
        self,
        user: UserSchema,
        question_id: UUID,
        *,
        feedback_type: FeedbackType | None = None,
        sort_by: FeedbackSort = "createdAt",
        sort_order: SortOrder = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> FeedbackPage:
        question, _ = self._access.visible_question(user.id, question_id)
        items, total = self._feedback.page_for_question(
            question.id,
            feedback_type=feedback_type,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
        average, count, breakdown = self._feedback.question_statistics(question.id)
        return FeedbackPage(
            feedback=items,
            total=total,
            page=page,
            limit=limit,
            statistics=FeedbackStatistics(
                average_rating=round(average, 2) if average is not None else None,
                total_feedbacks=count,
                difficulty_breakdown=breakdown,
            ),
        )

    def my_feedback(
        self,
        user: UserSchema,
        *,
        feedback_type: FeedbackType | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> FeedbackPage:
        items, total = self._feedback.page_for_user(
            user.id, feedback_type=feedback_type, page=page, limit=limit
        )
        return FeedbackPage(feedback=items, total=total, page=page, limit=limit)

    def update(
        self, user: UserSchema, feedback_id: UUID, changes: dict[str, Any]
    ) -> FeedbackSchema:
        feedback = self._owned(user, feedback_id)
        if utc_now() - as_utc(feedback.created_at) > EDIT_WINDOW:
            raise BadRequestError("Feedback can only be edited within 24 hours")

        if "voted_difficulty" in changes and changes["voted_difficulty"] is not None:
            feedback.voted_difficulty = changes["voted_difficulty"]
        if "rating" in changes:
            feedback.rating = changes["rating"]
        if "comment" in changes:
            comment = changes["comment"]
            feedback.comment = comment.strip() if comment else comment
        if "tags" in changes:
            feedback.tags = normalize_feedback_tags(changes["tags"])
        if "is_anonymous" in changes and changes["is_anonymous"] is not None:
            feedback.is_anonymous = changes["is_anonymous"]
        _validate(feedback.type, feedback.voted_difficulty, feedback.rating)

        feedback.last_modified = utc_now()
        self._feedback.save(feedback)
        logger.info("User %s updated feedback %s", user.id, feedback.id)
        return feedback

    def delete(self, user: UserSchema, feedback_id: UUID) -> None:
        feedback = self._owned(user, feedback_id)
        feedback.status = FeedbackStatus.DELETED
        self._feedback.save(feedback)
        logger.info("User %s deleted feedback %s", user.id, feedback.id)

    def vote(
        self, user: UserSchema, feedback_id: UUID, vote_type: VoteType
    ) -> FeedbackSchema:
        """Cast or replace the caller's helpfulness vote on someone else's feedback."""
        feedback = self._feedback.get_by_id(feedback_id)
        if feedback is None or feedback.status != FeedbackStatus.ACTIVE:
            raise NotFoundError("Feedback not found")
        if feedback.user_id == user.id:
            raise BadRequestError("You cannot vote on your own feedback")

        existing = next(
            (vote for vote in feedback.votes if vote.user_id == user.id), None
        )
        if existing is not None:
            existing.vote_type = vote_type
            existing.voted_at = utc_now()
        else:
            feedback.votes.append(
                FeedbackVoteSchema(user_id=user.id, vote_type=vote_type)
            )
        self._feedback.save(feedback)
        return feedback

    def report(
        self,
        user: UserSchema,
        feedback_id: UUID,
        reason: ReportReason,
        description: str | None = None,
    ) -> FeedbackSchema:
        feedback = self._feedback.get_by_id(feedback_id)
        if feedback is None or feedback.status == FeedbackStatus.DELETED:
            raise NotFoundError("Feedback not found")
        if any(entry.user_id == user.id for entry in feedback.reports):
            raise BadRequestError("You have already reported this feedback")

        feedback.reports.append(
            FeedbackReportSchema(
                user_id=user.id,
                reason=reason,
                description=description.strip() if description else description,
            )
        )
        if len(feedback.reports) >= REPORT_THRESHOLD:
            feedback.status = FeedbackStatus.REPORTED
            logger.warning("Feedback %s flagged after repeated reports", feedback.id)
        self._feedback.save(feedback)
        return feedback

    def _owned(self, user: UserSchema, feedback_id: UUID) -> FeedbackSchema:
        feedback = self._feedback.get_by_id(feedback_id)
        if feedback is None or feedback.status == FeedbackStatus.DELETED:
            raise NotFoundError("Feedback not found")
        if feedback.user_id != user.id:
            raise PermissionDeniedError("You can only modify your own feedback")
        return feedback
