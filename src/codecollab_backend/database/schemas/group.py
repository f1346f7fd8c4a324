"""Group and membership database schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codecollab_backend.database.base import BaseSchema, UTCDateTime, enum_column
from codecollab_backend.database.schemas.user import UserSchema
from codecollab_backend.shared import GroupCategory, MemberRole, MemberStatus, utc_now

DEFAULT_GROUP_SETTINGS: dict[str, bool] = {
    "allow_member_invites": True,
    "require_admin_approval": False,
    "allow_question_posting": True,
    "mute_members": False,
}

DEFAULT_MEMBER_PERMISSIONS: dict[str, bool] = {
    "can_post_questions": True,
    "can_comment": True,
    "can_invite_members": False,
}


def _default_settings() -> dict[str, bool]:
    return dict(DEFAULT_GROUP_SETTINGS)


def _default_permissions() -> dict[str, bool]:
    return dict(DEFAULT_MEMBER_PERMISSIONS)


class GroupSchema(BaseSchema):
    """A study group that owns questions and memberships."""

    __tablename__ = "groups"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    admin_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    invite_code: Mapped[str | None] = mapped_column(
        String(16), unique=True, nullable=True
    )
    invite_code_expiry: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True
    )
    max_members: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    category: Mapped[GroupCategory] = mapped_column(
        enum_column(GroupCategory, "group_category"),
        nullable=False,
        default=GroupCategory.GENERAL,
        index=True,
    )
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    avatar: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    settings: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=_default_settings
    )
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_members: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    last_activity: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now
    )

    admin: Mapped[UserSchema] = relationship(lazy="joined")

    def setting(self, key: str) -> bool:
        """Return a group setting, falling back to the default value."""
        return bool(self.settings.get(key, DEFAULT_GROUP_SETTINGS[key]))


class GroupMemberSchema(BaseSchema):
    """Membership of a user in a group."""

    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_group_members_user_group"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    group_id: Mapped[UUID] = mapped_column(
        ForeignKey("groups.id"), nullable=False, index=True
    )
    role: Mapped[MemberRole] = mapped_column(
        enum_column(MemberRole, "member_role"),
        nullable=False,
        default=MemberRole.MEMBER,
    )
    status: Mapped[MemberStatus] = mapped_column(
        enum_column(MemberStatus, "member_status"),
        nullable=False,
        default=MemberStatus.ACTIVE,
    )
    joined_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )
    last_active: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )
    permissions: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=_default_permissions
    )
    invited_by: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    ban_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    banned_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    banned_by: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    muted_until: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now
    )

    user: Mapped[UserSchema] = relationship(foreign_keys=[user_id], lazy="joined")
    group: Mapped[GroupSchema] = relationship(lazy="joined")

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE

    def permission(self, key: str) -> bool:
        """Return a member permission, falling back to the default value."""
        return bool(self.permissions.get(key, DEFAULT_MEMBER_PERMISSIONS[key]))
