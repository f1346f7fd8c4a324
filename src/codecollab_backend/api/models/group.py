"""Pydantic models for group endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, Field, field_validator

from codecollab_backend.api.models.auth import UserSummary
from codecollab_backend.shared import (
    CamelModel,
    GroupCategory,
    MemberRole,
    MemberStatus,
)
from codecollab_backend.stats import MemberStats

MAX_GROUP_TAG_LENGTH = 20


def _check_tags(value: list[str]) -> list[str]:
    for tag in value:
        if len(tag.strip()) > MAX_GROUP_TAG_LENGTH:
            msg = f"tags must be at most {MAX_GROUP_TAG_LENGTH} characters"
            raise ValueError(msg)
    return value


GroupTags = Annotated[list[str], AfterValidator(_check_tags)]


class GroupSettingsModel(CamelModel):
    allow_member_invites: bool = True
    require_admin_approval: bool = False
    allow_question_posting: bool = True
    mute_members: bool = False


class GroupSettingsUpdate(CamelModel):
    allow_member_invites: bool | None = None
    require_admin_approval: bool | None = None
    allow_question_posting: bool | None = None
    mute_members: bool | None = None


class GroupResponse(CamelModel):
    """Public representation of a group including its counters."""

    id_: UUID = Field(alias="id")
    name: str
    description: str | None = None
    is_private: bool
    admin: UserSummary
    invite_code: str | None = None
    invite_code_expiry: datetime | None = None
    max_members: int
    category: GroupCategory
    tags: list[str]
    avatar: str
    settings: GroupSettingsModel
    total_questions: int
    total_members: int
    last_activity: datetime
    is_active: bool
    created_at: datetime
    updated_at: datetime


class MyGroupResponse(GroupResponse):
    user_role: MemberRole
    joined_at: datetime
    member_count: int
    question_count: int


class GroupDetailResponse(GroupResponse):
    user_role: MemberRole | None = None
    user_status: MemberStatus | None = None
    moderators: list[UserSummary] = Field(default_factory=list)


class MyGroupsResponse(CamelModel):
    groups: list[MyGroupResponse]


class GroupCreateRequest(CamelModel):
    name: str = Field(min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_private: bool = False
    category: GroupCategory = GroupCategory.GENERAL
    tags: GroupTags = Field(default_factory=list)
    max_members: int = Field(default=100, ge=1, le=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if len(value.strip()) < 3:
            msg = "name must be at least 3 characters"
            raise ValueError(msg)
        return value


class GroupCreateResponse(CamelModel):
    message: str = "Group created successfully"
    group: GroupResponse


class GroupJoinRequest(CamelModel):
    invite_code: str = Field(min_length=1, max_length=32)


class GroupJoinResponse(CamelModel):
    message: str = "Successfully joined the group"
    group: GroupResponse


class GroupUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    category: GroupCategory | None = None
    tags: GroupTags | None = None
    max_members: int | None = Field(default=None, ge=1, le=1000)
    settings: GroupSettingsUpdate | None = None


class GroupUpdateResponse(CamelModel):
    message: str = "Group updated successfully"
    group: GroupResponse


class GroupMemberResponse(CamelModel):
    """An active member together with their statistics in the group."""

    user: UserSummary
    role: MemberRole
    status: MemberStatus
    joined_at: datetime
    last_active: datetime
    stats: MemberStats


class GroupMembersResponse(CamelModel):
    members: list[GroupMemberResponse]


class RemoveMemberRequest(CamelModel):
    reason: str | None = Field(default=None, max_length=500)


class InviteCodeRequest(CamelModel):
    expiry_hours: float | None = Field(default=None, gt=0, le=24 * 365)


class InviteCodeResponse(CamelModel):
    message: str = "New invite code generated"
    invite_code: str
    invite_code_expiry: datetime | None = None
