"""Repository helpers for groups and memberships."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from codecollab_backend.database.schemas import GroupMemberSchema, GroupSchema
from codecollab_backend.shared import MemberRole, MemberStatus


class GroupRepository:
    """Encapsulates persistence operations for :class:`GroupSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, group_id: UUID) -> GroupSchema | None:
        return self._session.get(GroupSchema, group_id)

    def get_active_by_invite_code(self, invite_code: str) -> GroupSchema | None:
        stmt = select(GroupSchema).where(
            GroupSchema.invite_code == invite_code,
            GroupSchema.is_active.is_(True),
        )
        return self._session.scalar(stmt)

    def invite_code_exists(self, invite_code: str) -> bool:
        stmt = select(GroupSchema.id).where(GroupSchema.invite_code == invite_code)
        return self._session.scalar(stmt) is not None

    def count_active_administered(self, admin_id: UUID) -> int:
        """Count active groups administered by *admin_id*."""
        stmt = select(func.count(GroupSchema.id)).where(
            GroupSchema.admin_id == admin_id,
            GroupSchema.is_active.is_(True),
        )
        return self._session.scalar(stmt) or 0

    def add(self, group: GroupSchema) -> GroupSchema:
        self._session.add(group)
        self._session.flush()
        self._session.refresh(group)
        return group

    def save(self, group: GroupSchema) -> GroupSchema:
        self._session.flush()
        return group


class MembershipRepository:
    """Encapsulates persistence operations for :class:`GroupMemberSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: UUID, group_id: UUID) -> GroupMemberSchema | None:
        """Return the membership row for the pair regardless of its status."""
        stmt = select(GroupMemberSchema).where(
            GroupMemberSchema.user_id == user_id,
            GroupMemberSchema.group_id == group_id,
        )
        return self._session.scalar(stmt)

    def get_active(self, user_id: UUID, group_id: UUID) -> GroupMemberSchema | None:
        membership = self.get(user_id, group_id)
        if membership is None or not membership.is_active:
            return None
        return membership

    def list_for_user(
        self, user_id: UUID, status: MemberStatus
    ) -> list[GroupMemberSchema]:
        """Return *user_id*'s memberships in active groups, newest first."""
        stmt = (
            select(GroupMemberSchema)
            .join(GroupSchema, GroupSchema.id == GroupMemberSchema.group_id)
            .where(
                GroupMemberSchema.user_id == user_id,
                GroupMemberSchema.status == status,
                GroupSchema.is_active.is_(True),
            )
            .order_by(GroupMemberSchema.joined_at.desc())
        )
        return list(self._session.scalars(stmt).unique())

    def list_active_members(self, group_id: UUID) -> list[GroupMemberSchema]:
        """Return active members of *group_id* in join order."""
        stmt = (
            select(GroupMemberSchema)
            .where(
                GroupMemberSchema.group_id == group_id,
                GroupMemberSchema.status == MemberStatus.ACTIVE,
            )
            .order_by(GroupMemberSchema.joined_at.asc())
        )
        return list(self._session.scalars(stmt).unique())

    def list_moderators(self, group_id: UUID) -> list[GroupMemberSchema]:
        stmt = select(GroupMemberSchema).where(
            GroupMemberSchema.group_id == group_id,
            GroupMemberSchema.role == MemberRole.MODERATOR,
            GroupMemberSchema.status == MemberStatus.ACTIVE,
        )
        return list(self._session.scalars(stmt).unique())

    def count_active(self, group_id: UUID, *, exclude_user: UUID | None = None) -> int:
        stmt = select(func.count(GroupMemberSchema.id)).where(
            GroupMemberSchema.group_id == group_id,
            GroupMemberSchema.status == MemberStatus.ACTIVE,
        )
        if exclude_user is not None:
            stmt = stmt.where(GroupMemberSchema.user_id != exclude_user)
        return self._session.scalar(stmt) or 0

    def active_group_ids(self, user_id: UUID) -> list[UUID]:
        stmt = select(GroupMemberSchema.group_id).where(
            GroupMemberSchema.user_id == user_id,
            GroupMemberSchema.status == MemberStatus.ACTIVE,
        )
        return list(self._session.scalars(stmt))

    def add(self, membership: GroupMemberSchema) -> GroupMemberSchema:
        self._session.add(membership)
        self._session.flush()
        self._session.refresh(membership)
        return membership

    def save(self, membership: GroupMemberSchema) -> GroupMemberSchema:
        self._session.flush()
        return membership
