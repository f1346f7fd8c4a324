"""Repository helpers for question feedback."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from codecollab_backend.database.schemas import FeedbackSchema, FeedbackVoteSchema
from codecollab_backend.shared import FeedbackStatus, FeedbackType, VoteType

FeedbackSort = Literal["createdAt", "rating", "helpfulScore"]
SortOrder = Literal["asc", "desc"]


def _helpful_score():
    return (
        select(
            func.coalesce(
                func.sum(
                    case((FeedbackVoteSchema.vote_type == VoteType.UPVOTE, 1), else_=-1)
                ),
                0,
            )
        )
        .where(FeedbackVoteSchema.feedback_id == FeedbackSchema.id)
        .correlate(FeedbackSchema)
        .scalar_subquery()
    )


class FeedbackRepository:
    """Encapsulates persistence operations for :class:`FeedbackSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, feedback_id: UUID) -> FeedbackSchema | None:
        return self._session.get(FeedbackSchema, feedback_id)

    def find(
        self, user_id: UUID, question_id: UUID, feedback_type: FeedbackType
    ) -> FeedbackSchema | None:
        """Return the caller's feedback of *feedback_type*, including deleted rows."""
        stmt = select(FeedbackSchema).where(
            FeedbackSchema.user_id == user_id,
            FeedbackSchema.question_id == question_id,
            FeedbackSchema.type == feedback_type,
        )
        return self._session.scalar(stmt)

    def page_for_question(
        self,
        question_id: UUID,
        *,
        feedback_type: FeedbackType | None = None,
        sort_by: FeedbackSort = "createdAt",
        sort_order: SortOrder = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[FeedbackSchema], int]:
        stmt = select(FeedbackSchema).where(
            FeedbackSchema.question_id == question_id,
            FeedbackSchema.status == FeedbackStatus.ACTIVE,
        )
        if feedback_type is not None:
            stmt = stmt.where(FeedbackSchema.type == feedback_type)
        column = {
            "rating": FeedbackSchema.rating,
            "helpfulScore": _helpful_score(),
        }.get(sort_by, FeedbackSchema.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        stmt = stmt.order_by(ordering, FeedbackSchema.created_at.desc())
        return self._page(stmt, page, limit), self._count(stmt)

    def page_for_user(
        self,
        user_id: UUID,
        *,
        feedback_type: FeedbackType | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[FeedbackSchema], int]:
        stmt = select(FeedbackSchema).where(
            FeedbackSchema.user_id == user_id,
            FeedbackSchema.status != FeedbackStatus.DELETED,
        )
        if feedback_type is not None:
            stmt = stmt.where(FeedbackSchema.type == feedback_type)
        stmt = stmt.order_by(FeedbackSchema.created_at.desc())
        return self._page(stmt, page, limit), self._count(stmt)

    def question_statistics(
        self, question_id: UUID
    ) -> tuple[float | None, int, dict[str, int]]:
        """Return average rating, active feedback count and difficulty vote counts."""
        active = (
            FeedbackSchema.question_id == question_id,
            FeedbackSchema.status == FeedbackStatus.ACTIVE,
        )
        average, total = self._session.execute(
            select(func.avg(FeedbackSchema.rating), func.count(FeedbackSchema.id)).where(
                *active
            )
        ).one()
        breakdown_rows = self._session.execute(
            select(FeedbackSchema.voted_difficulty, func.count(FeedbackSchema.id))
            .where(
                *active,
                FeedbackSchema.type == FeedbackType.DIFFICULTY_RATING,
                FeedbackSchema.voted_difficulty.is_not(None),
            )
            .group_by(FeedbackSchema.voted_difficulty)
        ).all()
        breakdown = {str(difficulty): count for difficulty, count in breakdown_rows}
        return (
            float(average) if average is not None else None,
            int(total or 0),
            breakdown,
        )

    def add(self, feedback: FeedbackSchema) -> FeedbackSchema:
        self._session.add(feedback)
        self._session.flush()
        self._session.refresh(feedback)
        return feedback

    def save(self, feedback: FeedbackSchema) -> FeedbackSchema:
        self._session.flush()
        return feedback

    def _count(self, stmt: Select) -> int:
        count_stmt = select(func.count()).select_from(
            stmt.order_by(None).subquery()
        )
        return self._session.scalar(count_stmt) or 0

    def _page(self, stmt: Select, page: int, limit: int) -> list[FeedbackSchema]:
        stmt = stmt.limit(limit).offset((page - 1) * limit)
        return list(self._session.scalars(stmt).unique())
