"""Membership and visibility checks shared by the group-scoped services."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from codecollab_backend.api.services.errors import NotFoundError, PermissionDeniedError
from codecollab_backend.database import (
    GroupMemberSchema,
    GroupRepository,
    GroupSchema,
    MembershipRepository,
    QuestionRepository,
    QuestionSchema,
)


class GroupAccess:
    """Loads groups and questions while enforcing who may see or act on them."""

    def __init__(self, session: Session) -> None:
        self.groups = GroupRepository(session)
        self.memberships = MembershipRepository(session)
        self.questions = QuestionRepository(session)

    def active_group(self, group_id: UUID) -> GroupSchema:
        group = self.groups.get_by_id(group_id)
        if group is None or not group.is_active:
            raise NotFoundError("Group not found")
        return group

    def visible_group(
        self,
        user_id: UUID,
        group_id: UUID,
        *,
        denied: str = "Access denied to private group",
    ) -> tuple[GroupSchema, GroupMemberSchema | None]:
        """Return the group and the caller's active membership, if any.

        Private groups are only visible to active members.
        """
        group = self.active_group(group_id)
        membership = self.memberships.get_active(user_id, group_id)
        if membership is None and group.is_private:
            raise PermissionDeniedError(denied)
        return group, membership

    def member_of(
        self, user_id: UUID, group_id: UUID, *, denied: str
    ) -> tuple[GroupSchema, GroupMemberSchema]:
        group = self.active_group(group_id)
        membership = self.memberships.get_active(user_id, group_id)
        if membership is None:
            raise PermissionDeniedError(denied)
        return group, membership

    def active_question(self, question_id: UUID) -> QuestionSchema:
        question = self.questions.get_by_id(question_id)
        if question is None or not question.is_active:
            raise NotFoundError("Question not found")
        return question

    def visible_question(
        self, user_id: UUID, question_id: UUID
    ) -> tuple[QuestionSchema, GroupMemberSchema | None]:
        question = self.active_question(question_id)
        group = self.groups.get_by_id(question.group_id)
        if group is None or not group.is_active:
            raise NotFoundError("Question not found")
        membership = self.memberships.get_active(user_id, group.id)
        if membership is None and group.is_private:
            raise PermissionDeniedError("Access denied")
        return question, membership

    def member_question(
        self, user_id: UUID, question_id: UUID, *, denied: str
    ) -> tuple[QuestionSchema, GroupMemberSchema]:
        question = self.active_question(question_id)
        group = self.groups.get_by_id(question.group_id)
        if group is None or not group.is_active:
            raise NotFoundError("Question not found")
        membership = self.memberships.get_active(user_id, group.id)
        if membership is None:
            raise PermissionDeniedError(denied)
        return question, membership
