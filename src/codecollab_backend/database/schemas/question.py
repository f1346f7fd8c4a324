"""Question database schema and the records members attach to it."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codecollab_backend.database.base import BaseSchema, UTCDateTime, enum_column
from codecollab_backend.database.schemas.user import UserSchema
from codecollab_backend.shared import (
    Difficulty,
    Platform,
    QuestionStatus,
    ResponseStatus,
    utc_now,
)


class QuestionSchema(BaseSchema):
    """A coding-practice problem posted to a group."""

    __tablename__ = "questions"
    __table_args__ = (Index("ix_questions_group_created", "group_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    source_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    difficulty: Mapped[Difficulty] = mapped_column(
        enum_column(Difficulty, "difficulty"), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    platform: Mapped[Platform] = mapped_column(
        enum_column(Platform, "platform"), nullable=False
    )
    group_id: Mapped[UUID] = mapped_column(ForeignKey("groups.id"), nullable=False)
    posted_by: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[QuestionStatus] = mapped_column(
        enum_column(QuestionStatus, "question_status"),
        nullable=False,
        default=QuestionStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now
    )

    poster: Mapped[UserSchema] = relationship(lazy="joined")
    likes: Mapped[list[QuestionLikeSchema]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    member_responses: Mapped[list[MemberResponseSchema]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="MemberResponseSchema.submitted_at",
    )
    difficulty_ratings: Mapped[list[DifficultyRatingSchema]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    solutions: Mapped[list[SolutionSchema]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SolutionSchema.created_at",
    )

    @property
    def is_active(self) -> bool:
        return self.status == QuestionStatus.ACTIVE

    @property
    def like_count(self) -> int:
        return len(self.likes)

    def response_for(self, user_id: UUID) -> MemberResponseSchema | None:
        """Return the response *user_id* logged for this question, if any."""
        return next(
            (entry for entry in self.member_responses if entry.user_id == user_id),
            None,
        )


class QuestionLikeSchema(BaseSchema):
    """A user's like on a question."""

    __tablename__ = "question_likes"
    __table_args__ = (
        UniqueConstraint("question_id", "user_id", name="uq_question_likes_user"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    question_id: Mapped[UUID] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )

    question: Mapped[QuestionSchema] = relationship(back_populates="likes")


class MemberResponseSchema(BaseSchema):
    """How a member fared on a question: solved, attempted or stuck."""

    __tablename__ = "member_responses"
    __table_args__ = (
        UniqueConstraint("question_id", "user_id", name="uq_member_responses_user"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    question_id: Mapped[UUID] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    status: Mapped[ResponseStatus] = mapped_column(
        enum_column(ResponseStatus, "response_status"), nullable=False
    )
    difficulty_rating: Mapped[Difficulty] = mapped_column(
        enum_column(Difficulty, "difficulty"), nullable=False
    )
    time_to_solve: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    submitted_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )

    question: Mapped[QuestionSchema] = relationship(back_populates="member_responses")
    user: Mapped[UserSchema] = relationship(lazy="joined")


class DifficultyRatingSchema(BaseSchema):
    """A standalone difficulty vote on a question."""

    __tablename__ = "difficulty_ratings"
    __table_args__ = (
        UniqueConstraint("question_id", "user_id", name="uq_difficulty_ratings_user"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    question_id: Mapped[UUID] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    rating: Mapped[Difficulty] = mapped_column(
        enum_column(Difficulty, "difficulty"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )

    question: Mapped[QuestionSchema] = relationship(back_populates="difficulty_ratings")


class SolutionSchema(BaseSchema):
    """Code a member shared as a solution to a question."""

    __tablename__ = "solutions"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    question_id: Mapped[UUID] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(String(50), nullable=False)
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_complexity: Mapped[str | None] = mapped_column(String(50), nullable=True)
    space_complexity: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )

    question: Mapped[QuestionSchema] = relationship(back_populates="solutions")
    user: Mapped[UserSchema] = relationship(lazy="joined")
