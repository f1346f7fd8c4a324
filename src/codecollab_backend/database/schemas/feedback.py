"""Feedback database schema with helpfulness votes and reports."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codecollab_backend.database.base import BaseSchema, UTCDateTime, enum_column
from codecollab_backend.database.schemas.question import QuestionSchema
from codecollab_backend.database.schemas.user import UserSchema
from codecollab_backend.shared import (
    Difficulty,
    FeedbackStatus,
    FeedbackType,
    ReportReason,
    VoteType,
    utc_now,
)


class FeedbackSchema(BaseSchema):
    """Feedback a user leaves on a question."""

    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "question_id", "type", name="uq_feedback_user_question_type"
        ),
        Index("ix_feedback_question_status", "question_id", "status"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    question_id: Mapped[UUID] = mapped_column(
        ForeignKey("questions.id"), nullable=False
    )
    type: Mapped[FeedbackType] = mapped_column(
        enum_column(FeedbackType, "feedback_type"),
        nullable=False,
        default=FeedbackType.DIFFICULTY_RATING,
    )
    voted_difficulty: Mapped[Difficulty | None] = mapped_column(
        enum_column(Difficulty, "difficulty"), nullable=True
    )
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    comment: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[FeedbackStatus] = mapped_column(
        enum_column(FeedbackStatus, "feedback_status"),
        nullable=False,
        default=FeedbackStatus.ACTIVE,
    )
    last_modified: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now, index=True
    )

    user: Mapped[UserSchema] = relationship(lazy="joined")
    question: Mapped[QuestionSchema] = relationship(lazy="joined")
    votes: Mapped[list[FeedbackVoteSchema]] = relationship(
        back_populates="feedback",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    reports: Mapped[list[FeedbackReportSchema]] = relationship(
        back_populates="feedback",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def upvotes(self) -> int:
        return sum(1 for vote in self.votes if vote.vote_type == VoteType.UPVOTE)

    @property
    def downvotes(self) -> int:
        return sum(1 for vote in self.votes if vote.vote_type == VoteType.DOWNVOTE)

    @property
    def helpful_score(self) -> int:
        return self.upvotes - self.downvotes


class FeedbackVoteSchema(BaseSchema):
    """A helpfulness vote cast on feedback; one per user."""

    __tablename__ = "feedback_votes"
    __table_args__ = (
        UniqueConstraint("feedback_id", "user_id", name="uq_feedback_votes_user"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    feedback_id: Mapped[UUID] = mapped_column(
        ForeignKey("feedback.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    vote_type: Mapped[VoteType] = mapped_column(
        enum_column(VoteType, "vote_type"), nullable=False
    )
    voted_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )

    feedback: Mapped[FeedbackSchema] = relationship(back_populates="votes")


class FeedbackReportSchema(BaseSchema):
    """An abuse report filed against feedback; one per user."""

    __tablename__ = "feedback_reports"
    __table_args__ = (
        UniqueConstraint("feedback_id", "user_id", name="uq_feedback_reports_user"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    feedback_id: Mapped[UUID] = mapped_column(
        ForeignKey("feedback.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    reason: Mapped[ReportReason] = mapped_column(
        enum_column(ReportReason, "report_reason"), nullable=False
    )
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    reported_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )

    feedback: Mapped[FeedbackSchema] = relationship(back_populates="reports")
