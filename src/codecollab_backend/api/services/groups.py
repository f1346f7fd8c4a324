"""Group lifecycle: creation, invites, membership and member statistics."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
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
from codecollab_backend.database import (
    GroupMemberSchema,
    GroupSchema,
    QuestionSchema,
    UserSchema,
)
from codecollab_backend.shared import (
    GroupCategory,
    MemberRole,
    MemberStatus,
    as_utc,
    utc_now,
)
from codecollab_backend.stats import MemberStats, assign_ranks, member_stats

logger = logging.getLogger(__name__)

MAX_ADMINISTERED_GROUPS = 10
INVITE_CODE_BYTES = 4
_INVITE_CODE_ATTEMPTS = 10
_UPDATABLE_FIELDS = ("name", "category", "tags", "max_members")


@dataclass(slots=True)
class UserGroupEntry:
    """A group the caller belongs to plus its live counters."""

    group: GroupSchema
    membership: GroupMemberSchema
    member_count: int
    question_count: int


@dataclass(slots=True)
class MemberEntry:
    """An active member and the statistics computed for them."""

    membership: GroupMemberSchema
    stats: MemberStats


def normalize_tags(tags: list[str] | None) -> list[str]:
    return [tag.strip().lower() for tag in tags or [] if tag.strip()]


class GroupService:
    """Implements the group endpoints on top of the repositories."""

    def __init__(self, session: Session) -> None:
        self._access = GroupAccess(session)
        self._groups = self._access.groups
        self._memberships = self._access.memberships
        self._questions = self._access.questions

    def create_group(
        self,
        admin: UserSchema,
        *,
        name: str,
        description: str | None = None,
        is_private: bool = False,
        category: GroupCategory = GroupCategory.GENERAL,
        tags: list[str] | None = None,
        max_members: int = 100,
    ) -> GroupSchema:
        if self._groups.count_active_administered(admin.id) >= MAX_ADMINISTERED_GROUPS:
            msg = f"You can only create up to {MAX_ADMINISTERED_GROUPS} groups"
            raise BadRequestError(msg)

        group = self._groups.add(
            GroupSchema(
                name=name.strip(),
                description=description.strip() if description else description,
                is_private=is_private,
                admin_id=admin.id,
                category=category,
                tags=normalize_tags(tags),
                max_members=max_members,
                invite_code=self._new_invite_code(),
            )
        )
        self._memberships.add(
            GroupMemberSchema(
                user_id=admin.id,
                group_id=group.id,
                role=MemberRole.ADMIN,
                status=MemberStatus.ACTIVE,
            )
        )
        logger.info("User %s created group %s", admin.id, group.id)
        return group

    def join_group(
        self, user: UserSchema, invite_code: str
    ) -> tuple[GroupSchema, GroupMemberSchema]:
        code = invite_code.strip().upper()
        if not code:
            raise BadRequestError("Invite code is required")
        group = self._groups.get_active_by_invite_code(code)
        if group is None:
            raise NotFoundError("Invalid invite code or group not found")
        if invite_code_expired(group):
            raise BadRequestError("Invite code has expired")

        membership = self._memberships.get(user.id, group.id)
        if membership is not None and membership.status == MemberStatus.ACTIVE:
            raise BadRequestError("You are already a member of this group")
        if membership is not None and membership.status == MemberStatus.BANNED:
            raise PermissionDeniedError("You have been removed from this group")
        if group.total_members >= group.max_members:
            raise BadRequestError("This group is full")

        now = utc_now()
        if membership is None:
            membership = self._memberships.add(
                GroupMemberSchema(
                    user_id=user.id,
                    group_id=group.id,
                    role=MemberRole.MEMBER,
                    status=MemberStatus.ACTIVE,
                    joined_at=now,
                    last_active=now,
                )
            )
        else:
            membership.status = MemberStatus.ACTIVE
            membership.joined_at = now
            membership.last_active = now
            self._memberships.save(membership)

        group.total_members += 1
        group.last_activity = now
        self._groups.save(group)
        logger.info("User %s joined group %s", user.id, group.id)
        return group, membership

    def list_user_groups(
        self, user: UserSchema, status: MemberStatus = MemberStatus.ACTIVE
    ) -> list[UserGroupEntry]:
        return [
            UserGroupEntry(
                group=membership.group,
                membership=membership,
                member_count=self._memberships.count_active(membership.group_id),
                question_count=self._questions.count_active(membership.group_id),
            )
            for membership in self._memberships.list_for_user(user.id, status)
        ]

    def get_group_details(
        self, user: UserSchema, group_id: UUID
    ) -> tuple[GroupSchema, GroupMemberSchema | None, list[UserSchema]]:
        group = self._access.active_group(group_id)
        membership = self._memberships.get(user.id, group_id)
        if group.is_private and (membership is None or not membership.is_active):
            raise PermissionDeniedError("This is a private group")
        moderators = [entry.user for entry in self._memberships.list_moderators(group_id)]
        return group, membership, moderators

    def update_group(
        self,
        user: UserSchema,
        group_id: UUID,
        changes: dict[str, Any],
    ) -> GroupSchema:
        group = self._access.active_group(group_id)
        membership = self._memberships.get_active(user.id, group_id)
        if membership is None or membership.role not in (
            MemberRole.ADMIN,
            MemberRole.MODERATOR,
        ):
            raise PermissionDeniedError(
                "Only admins and moderators can update group details"
            )

        if "description" in changes:
            description = changes["description"]
            group.description = description.strip() if description else None
        for field in _UPDATABLE_FIELDS:
            value = changes.get(field)
            if value is None:
                continue
            if field == "name":
                value = value.strip()
            elif field == "tags":
                value = normalize_tags(value)
            setattr(group, field, value)

        settings = changes.get("settings")
        if settings and membership.role == MemberRole.ADMIN:
            updates = {key: value for key, value in settings.items() if value is not None}
            group.settings = {**group.settings, **updates}

        self._groups.save(group)
        logger.info("User %s updated group %s", user.id, group.id)
        return group

    def leave_group(self, user: UserSchema, group_id: UUID) -> None:
        group = self._groups.get_by_id(group_id)
        if group is None:
            raise NotFoundError("Group not found")
        membership = self._memberships.get_active(user.id, group_id)
        if membership is None:
            raise BadRequestError("You are not a member of this group")

        if membership.role == MemberRole.ADMIN:
            others = self._memberships.count_active(group_id, exclude_user=user.id)
            if others > 0:
                raise BadRequestError(
                    "You must transfer admin role to another member before leaving"
                )
            group.is_active = False
            logger.info("Group %s closed after its admin left", group.id)

        membership.status = MemberStatus.LEFT
        self._memberships.save(membership)
        group.total_members = max(0, group.total_members - 1)
        self._groups.save(group)
        logger.info("User %s left group %s", user.id, group.id)

    def remove_member(
        self,
        user: UserSchema,
        group_id: UUID,
        member_id: UUID,
        reason: str | None = None,
    ) -> None:
        own = self._memberships.get_active(user.id, group_id)
        if own is None or own.role != MemberRole.ADMIN:
            raise PermissionDeniedError("Only group admins can remove members")

        target = self._memberships.get(member_id, group_id)
        if target is None:
            raise NotFoundError("Member not found")
        if target.role == MemberRole.ADMIN:
            raise BadRequestError("Cannot remove group admin")

        was_active = target.is_active
        target.status = MemberStatus.BANNED
        target.ban_reason = reason
        target.banned_at = utc_now()
        target.banned_by = user.id
        self._memberships.save(target)

        if was_active:
            group = self._groups.get_by_id(group_id)
            if group is not None:
                group.total_members = max(0, group.total_members - 1)
                self._groups.save(group)
        logger.info("User %s removed member %s from group %s", user.id, member_id, group_id)

    def generate_invite_code(
        self,
        user: UserSchema,
        group_id: UUID,
        expiry_hours: float | None = None,
    ) -> GroupSchema:
        group = self._access.active_group(group_id)
        membership = self._memberships.get_active(user.id, group_id)
        allowed = membership is not None and (
            membership.role in (MemberRole.ADMIN, MemberRole.MODERATOR)
            or group.setting("allow_member_invites")
        )
        if not allowed:
            raise PermissionDeniedError(
                "You do not have permission to generate invite codes"
            )

        group.invite_code = self._new_invite_code()
        group.invite_code_expiry = (
            utc_now() + timedelta(hours=expiry_hours) if expiry_hours else None
        )
        self._groups.save(group)
        logger.info("User %s rotated the invite code of group %s", user.id, group.id)
        return group

    def list_members_with_stats(
        self, user: UserSchema, group_id: UUID
    ) -> list[MemberEntry]:
        self._access.visible_group(user.id, group_id, denied="Access denied")
        questions = self._questions.list_active(group_id)
        entries = [
            MemberEntry(
                membership=membership,
                stats=member_stats(membership.user_id, questions),
            )
            for membership in self._memberships.list_active_members(group_id)
        ]
        assign_ranks(entries)
        return entries

    def list_group_questions(
        self, user: UserSchema, group_id: UUID
    ) -> list[QuestionSchema]:
        self._access.visible_group(user.id, group_id)
        return self._questions.list_active(group_id)

    def _new_invite_code(self) -> str:
        for _ in range(_INVITE_CODE_ATTEMPTS):
            code = secrets.token_hex(INVITE_CODE_BYTES).upper()
            if not self._groups.invite_code_exists(code):
                return code
        msg = "Could not allocate a unique invite code"
        raise RuntimeError(msg)


def invite_code_expired(group: GroupSchema) -> bool:
    return group.invite_code_expiry is not None and as_utc(
        group.invite_code_expiry
    ) <= utc_now()
