"""Repository helpers for questions and their member-owned records."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from codecollab_backend.database.schemas import (
    GroupMemberSchema,
    GroupSchema,
    MemberResponseSchema,
    QuestionLikeSchema,
    QuestionSchema,
)
from codecollab_backend.shared import (
    Difficulty,
    MemberStatus,
    QuestionStatus,
    ResponseStatus,
)

QuestionSort = Literal["createdAt", "views", "likes", "solved"]


def _like_count():
    return (
        select(func.count(QuestionLikeSchema.id))
        .where(QuestionLikeSchema.question_id == QuestionSchema.id)
        .correlate(QuestionSchema)
        .scalar_subquery()
    )


def _solved_count():
    return (
        select(func.count(MemberResponseSchema.id))
        .where(
            MemberResponseSchema.question_id == QuestionSchema.id,
            MemberResponseSchema.status == ResponseStatus.SOLVED,
        )
        .correlate(QuestionSchema)
        .scalar_subquery()
    )


class QuestionRepository:
    """Encapsulates persistence operations for :class:`QuestionSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, question_id: UUID) -> QuestionSchema | None:
        return self._session.get(QuestionSchema, question_id)

    def find_active_by_source(
        self, group_id: UUID, source_url: str
    ) -> QuestionSchema | None:
        stmt = select(QuestionSchema).where(
            QuestionSchema.group_id == group_id,
            QuestionSchema.source_url == source_url,
            QuestionSchema.status == QuestionStatus.ACTIVE,
        )
        return self._session.scalar(stmt)

    def count_active(self, group_id: UUID) -> int:
        stmt = select(func.count(QuestionSchema.id)).where(
            QuestionSchema.group_id == group_id,
            QuestionSchema.status == QuestionStatus.ACTIVE,
        )
        return self._session.scalar(stmt) or 0

    def list_active(self, group_id: UUID) -> list[QuestionSchema]:
        """Return every active question of *group_id*, newest first."""
        stmt = (
            select(QuestionSchema)
            .where(
                QuestionSchema.group_id == group_id,
                QuestionSchema.status == QuestionStatus.ACTIVE,
            )
            .order_by(QuestionSchema.created_at.desc())
        )
        return list(self._session.scalars(stmt).unique())

    def page_for_group(
        self,
        group_id: UUID,
        *,
        difficulty: Difficulty | None = None,
        category: str | None = None,
        sort_by: QuestionSort = "createdAt",
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[QuestionSchema], int]:
        """Return one page of a group's active questions and the total match count."""
        stmt = select(QuestionSchema).where(
            QuestionSchema.group_id == group_id,
            QuestionSchema.status == QuestionStatus.ACTIVE,
        )
        if difficulty is not None:
            stmt = stmt.where(QuestionSchema.difficulty == difficulty)
        if category:
            stmt = stmt.where(QuestionSchema.category == category)

        total = self._count(stmt)
        ordering = {
            "views": (QuestionSchema.views.desc(),),
            "likes": (_like_count().desc(),),
            "solved": (_solved_count().desc(),),
        }.get(sort_by, ())
        stmt = stmt.order_by(*ordering, QuestionSchema.created_at.desc())
        return self._page(stmt, page, limit), total

    def search(
        self,
        term: str,
        *,
        visible_to: UUID,
        group_id: UUID | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> list[QuestionSchema]:
        """Search title, description and tags among questions *visible_to* may see."""
        pattern = f"%{term}%"
        member_groups = select(GroupMemberSchema.group_id).where(
            GroupMemberSchema.user_id == visible_to,
            GroupMemberSchema.status == MemberStatus.ACTIVE,
        )
        visible_groups = select(GroupSchema.id).where(
            GroupSchema.is_active.is_(True),
            or_(
                GroupSchema.is_private.is_(False),
                GroupSchema.id.in_(member_groups),
            ),
        )
        stmt = select(QuestionSchema).where(
            QuestionSchema.status == QuestionStatus.ACTIVE,
            QuestionSchema.group_id.in_(visible_groups),
            or_(
                QuestionSchema.title.ilike(pattern),
                QuestionSchema.description.ilike(pattern),
                self._tag_matches(pattern),
            ),
        )
        if group_id is not None:
            stmt = stmt.where(QuestionSchema.group_id == group_id)
        stmt = stmt.order_by(QuestionSchema.created_at.desc())
        return self._page(stmt, page, limit)

    def _tag_matches(self, pattern: str):
        """Match *pattern* against each tag element rather than the serialized list."""
        if self._session.get_bind().dialect.name == "postgresql":
            elements = func.json_array_elements_text(QuestionSchema.tags)
        else:
            elements = func.json_each(QuestionSchema.tags)
        tag = elements.table_valued("value", name="tag")
        return (
            select(1)
            .select_from(tag)
            .where(tag.c.value.ilike(pattern))
            .correlate(QuestionSchema)
            .exists()
        )

    def add(self, question: QuestionSchema) -> QuestionSchema:
        self._session.add(question)
        self._session.flush()
        self._session.refresh(question)
        return question

    def save(self, question: QuestionSchema) -> QuestionSchema:
        self._session.flush()
        return question

    def _count(self, stmt: Select) -> int:
        count_stmt = select(func.count()).select_from(
            stmt.order_by(None).subquery()
        )
        return self._session.scalar(count_stmt) or 0

    def _page(self, stmt: Select, page: int, limit: int) -> list[QuestionSchema]:
        stmt = stmt.limit(limit).offset((page - 1) * limit)
        return list(self._session.scalars(stmt).unique())
