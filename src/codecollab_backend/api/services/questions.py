"""Question posting, browsing and member response tracking."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from codecollab_backend.api.services.access import GroupAccess
from codecollab_backend.api.services.errors import BadRequestError, PermissionDeniedError
from codecollab_backend.database import (
    MemberResponseSchema,
    QuestionSchema,
    UserSchema,
)
from codecollab_backend.database.repositories import QuestionSort
from codecollab_backend.database.schemas import (
    DifficultyRatingSchema,
    QuestionLikeSchema,
    SolutionSchema,
)
from codecollab_backend.shared import (
    Difficulty,
    MemberRole,
    Platform,
    QuestionStatus,
    ResponseStatus,
    utc_now,
)
from codecollab_backend.stats import QuestionStats, question_stats

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
_UPDATABLE_FIELDS = ("title", "description", "difficulty", "category", "tags")


@dataclass(slots=True)
class QuestionPage:
    questions: list[QuestionSchema]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


@dataclass(slots=True)
class ResponseBreakdown:
    """A question's responses bucketed by status along with their statistics."""

    question: QuestionSchema
    solved: list[MemberResponseSchema]
    attempted: list[MemberResponseSchema]
    stuck: list[MemberResponseSchema]
    stats: QuestionStats


class QuestionService:
    """Implements the question endpoints on top of the repositories."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._access = GroupAccess(session)
        self._groups = self._access.groups
        self._memberships = self._access.memberships
        self._questions = self._access.questions

    def create_question(
        self,
        user: UserSchema,
        *,
        group_id: UUID,
        title: str,
        source_url: str,
        difficulty: Difficulty,
        category: str,
        platform: Platform,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> QuestionSchema:
        group, membership = self._access.member_of(
            user.id,
            group_id,
            denied="You must be a member of this group to add questions",
        )
        if membership.role != MemberRole.ADMIN and (
            not group.setting("allow_question_posting")
            or not membership.permission("can_post_questions")
        ):
            raise PermissionDeniedError("Question posting is disabled for you in this group")

        source_url = source_url.strip()
        if self._questions.find_active_by_source(group_id, source_url) is not None:
            raise BadRequestError("This question already exists in the group")

        question = self._questions.add(
            QuestionSchema(
                title=title.strip(),
                description=description.strip() if description else description,
                source_url=source_url,
                difficulty=difficulty,
                category=category.strip(),
                tags=[tag.strip() for tag in tags or [] if tag.strip()],
                platform=platform,
                group_id=group_id,
                posted_by=user.id,
            )
        )
        group.total_questions += 1
        group.last_activity = utc_now()
        self._groups.save(group)
        logger.info("User %s posted question %s to group %s", user.id, question.id, group_id)
        return question

    def list_group_questions(
        self,
        user: UserSchema,
        group_id: UUID,
        *,
        difficulty: Difficulty | None = None,
        category: str | None = None,
        sort_by: QuestionSort = "createdAt",
        page: int = 1,
        limit: int = 20,
    ) -> QuestionPage:
        self._access.visible_group(user.id, group_id)
        questions, total = self._questions.page_for_group(
            group_id,
            difficulty=difficulty,
            category=category,
            sort_by=sort_by,
            page=page,
            limit=limit,
        )
        return QuestionPage(questions=questions, total=total, page=page, limit=limit)

    def search(
        self,
        user: UserSchema,
        term: str,
        *,
        group_id: UUID | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> list[QuestionSchema]:
        term = term.strip()
        if len(term) < MIN_SEARCH_LENGTH:
            msg = f"Search query must be at least {MIN_SEARCH_LENGTH} characters"
            raise BadRequestError(msg)
        return self._questions.search(
            term, visible_to=user.id, group_id=group_id, page=page, limit=limit
        )

    def get_question(self, user: UserSchema, question_id: UUID) -> QuestionSchema:
        """Return a visible question, counting a view unless the poster reads it."""
        question, _ = self._access.visible_question(user.id, question_id)
        if question.posted_by != user.id:
            question.views += 1
            self._questions.save(question)
        return question

    def update_question(
        self, user: UserSchema, question_id: UUID, changes: dict[str, Any]
    ) -> QuestionSchema:
        question = self._require_owner_or_admin(user, question_id)
        for field in _UPDATABLE_FIELDS:
            if field not in changes:
                continue
            value = changes[field]
            if field in ("title", "difficulty", "category") and value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
            elif field == "tags":
                value = [tag.strip() for tag in value or [] if tag.strip()]
            setattr(question, field, value)
        self._questions.save(question)
        logger.info("User %s updated question %s", user.id, question.id)
        return question

    def delete_question(self, user: UserSchema, question_id: UUID) -> None:
        question = self._require_owner_or_admin(user, question_id)
        question.status = QuestionStatus.DELETED
        self._questions.save(question)
        group = self._groups.get_by_id(question.group_id)
        if group is not None:
            group.total_questions = max(0, group.total_questions - 1)
            self._groups.save(group)
        logger.info("User %s deleted question %s", user.id, question.id)

    def rate_difficulty(
        self, user: UserSchema, question_id: UUID, rating: Difficulty
    ) -> None:
        question, _ = self._access.member_question(
            user.id, question_id, denied="You must be a member of this group to rate"
        )
        existing = next(
            (entry for entry in question.difficulty_ratings if entry.user_id == user.id),
            None,
        )
        if existing is not None:
            existing.rating = rating
            existing.created_at = utc_now()
        else:
            question.difficulty_ratings.append(
                DifficultyRatingSchema(user_id=user.id, rating=rating)
            )
        self._questions.save(question)

    def toggle_like(self, user: UserSchema, question_id: UUID) -> tuple[bool, int]:
        """Flip the caller's like; returns whether it is now liked and the total."""
        question, _ = self._access.visible_question(user.id, question_id)
        existing = next(
            (like for like in question.likes if like.user_id == user.id), None
        )
        if existing is not None:
            question.likes.remove(existing)
        else:
            question.likes.append(QuestionLikeSchema(user_id=user.id))
        self._questions.save(question)
        return existing is None, question.like_count

    def add_solution(
        self,
        user: UserSchema,
        question_id: UUID,
        *,
        code: str,
        language: str,
        explanation: str | None = None,
        time_complexity: str | None = None,
        space_complexity: str | None = None,
    ) -> SolutionSchema:
        question, _ = self._access.member_question(
            user.id,
            question_id,
            denied="You must be a member of this group to share solutions",
        )
        solution = SolutionSchema(
            user_id=user.id,
            code=code,
            language=language.strip(),
            explanation=explanation,
            time_complexity=time_complexity,
            space_complexity=space_complexity,
        )
        question.solutions.append(solution)
        self._questions.save(question)
        self._session.refresh(solution)
        logger.info("User %s shared a solution for question %s", user.id, question.id)
        return solution

    def list_solutions(
        self, user: UserSchema, question_id: UUID
    ) -> list[SolutionSchema]:
        question, _ = self._access.visible_question(user.id, question_id)
        return list(question.solutions)

    def submit_response(
        self,
        user: UserSchema,
        question_id: UUID,
        *,
        status: ResponseStatus,
        difficulty_rating: Difficulty,
        time_to_solve: int | None = None,
        notes: str | None = None,
    ) -> tuple[MemberResponseSchema, bool, QuestionStats]:
        """Record or replace the caller's response.

        Returns the stored response, whether it replaced an earlier one, and the
        refreshed question statistics.
        """
        question, membership = self._access.member_question(
            user.id,
            question_id,
            denied="You must be a member of this group to submit responses",
        )
        now = utc_now()
        response = question.response_for(user.id)
        updated = response is not None
        if response is None:
            response = MemberResponseSchema(user_id=user.id)
            question.member_responses.append(response)
        response.status = status
        response.difficulty_rating = difficulty_rating
        response.time_to_solve = time_to_solve or None
        response.notes = (notes or "").strip()
        response.submitted_at = now

        membership.last_active = now
        group = self._groups.get_by_id(question.group_id)
        if group is not None:
            group.last_activity = now
        self._questions.save(question)
        self._session.refresh(response)
        logger.info(
            "User %s marked question %s as %s", user.id, question.id, status.value
        )
        return response, updated, question_stats(question.member_responses)

    def get_user_response(
        self, user: UserSchema, question_id: UUID
    ) -> tuple[MemberResponseSchema | None, QuestionStats]:
        question, _ = self._access.visible_question(user.id, question_id)
        return question.response_for(user.id), question_stats(question.member_responses)

    def get_member_responses(
        self, user: UserSchema, question_id: UUID
    ) -> ResponseBreakdown:
        question, _ = self._access.member_question(
            user.id,
            question_id,
            denied="You must be a member of this group to view responses",
        )
        responses = list(question.member_responses)

        def by_status(value: ResponseStatus) -> list[MemberResponseSchema]:
            return [entry for entry in responses if entry.status == value]

        return ResponseBreakdown(
            question=question,
            solved=by_status(ResponseStatus.SOLVED),
            attempted=by_status(ResponseStatus.ATTEMPTED),
            stuck=by_status(ResponseStatus.STUCK),
            stats=question_stats(responses),
        )

    def _require_owner_or_admin(
        self, user: UserSchema, question_id: UUID
    ) -> QuestionSchema:
        question = self._access.active_question(question_id)
        membership = self._memberships.get_active(user.id, question.group_id)
        is_admin = membership is not None and membership.role == MemberRole.ADMIN
        if question.posted_by != user.id and not is_admin:
            raise PermissionDeniedError("Permission denied")
        return question
