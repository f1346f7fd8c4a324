"""Study group endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status

from codecollab_backend.api.dependencies import get_current_user, get_group_service
from codecollab_backend.api.models import (
    GroupCreateRequest,
    GroupCreateResponse,
    GroupDetailResponse,
    GroupJoinRequest,
    GroupJoinResponse,
    GroupMemberResponse,
    GroupMembersResponse,
    GroupResponse,
    GroupUpdateRequest,
    GroupUpdateResponse,
    InviteCodeRequest,
    InviteCodeResponse,
    MessageResponse,
    MyGroupResponse,
    MyGroupsResponse,
    QuestionCollectionResponse,
    QuestionResponse,
    RemoveMemberRequest,
    UserSummary,
)
from codecollab_backend.api.rate_limit import rate_limit
from codecollab_backend.api.services import GroupService
from codecollab_backend.database import UserSchema
from codecollab_backend.shared import MemberStatus

router = APIRouter(prefix="/api/groups", tags=["groups"])


@router.post(
    "/create",
    response_model=GroupCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("group"))],
)
def create_group(
    payload: GroupCreateRequest,
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> GroupCreateResponse:
    """Create a group administered by the caller."""

    group = service.create_group(
        user,
        name=payload.name,
        description=payload.description,
        is_private=payload.is_private,
        category=payload.category,
        tags=payload.tags,
        max_members=payload.max_members,
    )
    return GroupCreateResponse(group=GroupResponse.model_validate(group))


@router.post(
    "/join",
    response_model=GroupJoinResponse,
    dependencies=[Depends(rate_limit("join"))],
)
def join_group(
    payload: GroupJoinRequest,
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> GroupJoinResponse:
    group, _ = service.join_group(user, payload.invite_code)
    return GroupJoinResponse(group=GroupResponse.model_validate(group))


@router.get("/my-groups", response_model=MyGroupsResponse)
def my_groups(
    status_filter: MemberStatus = Query(default=MemberStatus.ACTIVE, alias="status"),
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> MyGroupsResponse:
    """List the caller's groups, most recently joined first."""

    entries = service.list_user_groups(user, status_filter)
    return MyGroupsResponse(
        groups=[
            MyGroupResponse(
                **GroupResponse.model_validate(entry.group).model_dump(),
                user_role=entry.membership.role,
                joined_at=entry.membership.joined_at,
                member_count=entry.member_count,
                question_count=entry.question_count,
            )
            for entry in entries
        ]
    )


@router.get("/{group_id}", response_model=GroupDetailResponse)
def get_group(
    group_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    group, membership, moderators = service.get_group_details(user, group_id)
    details = GroupResponse.model_validate(group).model_dump()
    is_member = membership is not None and membership.is_active
    if not is_member:
        details["invite_code"] = None
        details["invite_code_expiry"] = None
    return GroupDetailResponse(
        **details,
        user_role=membership.role if is_member else None,
        user_status=membership.status if membership is not None else None,
        moderators=[UserSummary.model_validate(entry) for entry in moderators],
    )


@router.put("/{group_id}", response_model=GroupUpdateResponse)
def update_group(
    group_id: UUID,
    payload: GroupUpdateRequest,
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> GroupUpdateResponse:
    group = service.update_group(user, group_id, payload.model_dump(exclude_unset=True))
    return GroupUpdateResponse(group=GroupResponse.model_validate(group))


@router.get("/{group_id}/members", response_model=GroupMembersResponse)
def list_members(
    group_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> GroupMembersResponse:
    """List active members with their solve statistics and rank."""

    entries = service.list_members_with_stats(user, group_id)
    return GroupMembersResponse(
        members=[
            GroupMemberResponse(
                user=UserSummary.model_validate(entry.membership.user),
                role=entry.membership.role,
                status=entry.membership.status,
                joined_at=entry.membership.joined_at,
                last_active=entry.membership.last_active,
                stats=entry.stats,
            )
            for entry in entries
        ]
    )


@router.get("/{group_id}/questions", response_model=QuestionCollectionResponse)
def list_questions(
    group_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> QuestionCollectionResponse:
    questions = service.list_group_questions(user, group_id)
    return QuestionCollectionResponse(
        questions=[QuestionResponse.model_validate(question) for question in questions]
    )


@router.post("/{group_id}/leave", response_model=MessageResponse)
def leave_group(
    group_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> MessageResponse:
    service.leave_group(user, group_id)
    return MessageResponse(message="Successfully left the group")


@router.delete("/{group_id}/members/{member_id}", response_model=MessageResponse)
def remove_member(
    group_id: UUID,
    member_id: UUID,
    payload: RemoveMemberRequest | None = Body(default=None),
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> MessageResponse:
    reason = payload.reason if payload is not None else None
    service.remove_member(user, group_id, member_id, reason)
    return MessageResponse(message="Member removed successfully")


@router.post(
    "/{group_id}/invite-code",
    response_model=InviteCodeResponse,
    dependencies=[Depends(rate_limit("invite"))],
)
def generate_invite_code(
    group_id: UUID,
    payload: InviteCodeRequest | None = Body(default=None),
    user: UserSchema = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
) -> InviteCodeResponse:
    expiry_hours = payload.expiry_hours if payload is not None else None
    group = service.generate_invite_code(user, group_id, expiry_hours)
    return InviteCodeResponse(
        invite_code=group.invite_code,
        invite_code_expiry=group.invite_code_expiry,
    )
