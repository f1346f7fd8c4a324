"""Models used for API request and response payloads."""

from codecollab_backend.api.models.auth import (
    AuthTokenResponse,
    PasswordChangeRequest,
    PasswordChangeResponse,
    ProfileUpdateRequest,
    PublicUserResponse,
    UserLoginRequest,
    UserLoginResponse,
    UserRegisterRequest,
    UserRegisterResponse,
    UserResponse,
    UserSummary,
)
from codecollab_backend.api.models.feedback import (
    FeedbackReportRequest,
    FeedbackResponse,
    FeedbackStatisticsModel,
    FeedbackSubmitRequest,
    FeedbackSubmitResponse,
    FeedbackUpdateRequest,
    FeedbackUpdateResponse,
    FeedbackVoteRequest,
    FeedbackVoteResponse,
    MyFeedbackResponse,
    PaginationModel,
    QuestionFeedbackResponse,
)
from codecollab_backend.api.models.group import (
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
    MyGroupResponse,
    MyGroupsResponse,
    RemoveMemberRequest,
)
from codecollab_backend.api.models.question import (
    DifficultyRateRequest,
    GroupedResponses,
    LikeToggleResponse,
    MemberResponseModel,
    MemberResponsesResult,
    QuestionBrief,
    QuestionCollectionResponse,
    QuestionCreateRequest,
    QuestionCreateResponse,
    QuestionDetailResponse,
    QuestionListItem,
    QuestionListResponse,
    QuestionResponse,
    QuestionUpdateRequest,
    QuestionUpdateResponse,
    QuestionViewResponse,
    ResponseSubmitRequest,
    ResponseSubmitResponse,
    SolutionCreateRequest,
    SolutionCreateResponse,
    SolutionListResponse,
    SolutionResponse,
    UserResponseResult,
)
from codecollab_backend.api.models.system import (
    CorsInfoResponse,
    HealthResponse,
    MessageResponse,
)

__all__ = [
    "AuthTokenResponse",
    "CorsInfoResponse",
    "DifficultyRateRequest",
    "FeedbackReportRequest",
    "FeedbackResponse",
    "FeedbackStatisticsModel",
    "FeedbackSubmitRequest",
    "FeedbackSubmitResponse",
    "FeedbackUpdateRequest",
    "FeedbackUpdateResponse",
    "FeedbackVoteRequest",
    "FeedbackVoteResponse",
    "GroupCreateRequest",
    "GroupCreateResponse",
    "GroupDetailResponse",
    "GroupJoinRequest",
    "GroupJoinResponse",
    "GroupMemberResponse",
    "GroupMembersResponse",
    "GroupResponse",
    "GroupUpdateRequest",
    "GroupUpdateResponse",
    "GroupedResponses",
    "HealthResponse",
    "InviteCodeRequest",
    "InviteCodeResponse",
    "LikeToggleResponse",
    "MemberResponseModel",
    "MemberResponsesResult",
    "MessageResponse",
    "MyFeedbackResponse",
    "MyGroupResponse",
    "MyGroupsResponse",
    "PaginationModel",
    "PasswordChangeRequest",
    "PasswordChangeResponse",
    "ProfileUpdateRequest",
    "PublicUserResponse",
    "QuestionBrief",
    "QuestionCollectionResponse",
    "QuestionCreateRequest",
    "QuestionCreateResponse",
    "QuestionDetailResponse",
    "QuestionFeedbackResponse",
    "QuestionListItem",
    "QuestionListResponse",
    "QuestionResponse",
    "QuestionUpdateRequest",
    "QuestionUpdateResponse",
    "QuestionViewResponse",
    "RemoveMemberRequest",
    "ResponseSubmitRequest",
    "ResponseSubmitResponse",
    "SolutionCreateRequest",
    "SolutionCreateResponse",
    "SolutionListResponse",
    "SolutionResponse",
    "UserLoginRequest",
    "UserLoginResponse",
    "UserRegisterRequest",
    "UserRegisterResponse",
    "UserResponse",
    "UserResponseResult",
    "UserSummary",
]
