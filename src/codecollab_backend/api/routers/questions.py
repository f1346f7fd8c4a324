"""Question, solution and member response endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from codecollab_backend.api.dependencies import get_current_user, get_question_service
from codecollab_backend.api.models import (
    DifficultyRateRequest,
    GroupedResponses,
    LikeToggleResponse,
    MemberResponseModel,
    MemberResponsesResult,
    MessageResponse,
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
from codecollab_backend.api.rate_limit import rate_limit
from codecollab_backend.api.services import QuestionService
from codecollab_backend.database import (
    MemberResponseSchema,
    QuestionSchema,
    UserSchema,
)
from codecollab_backend.database.repositories import QuestionSort
from codecollab_backend.shared import Difficulty
from codecollab_backend.stats import question_stats

router = APIRouter(prefix="/api/questions", tags=["questions"])


def _response_model(
    response: MemberResponseSchema | None,
) -> MemberResponseModel | None:
    return MemberResponseModel.model_validate(response) if response else None


def _list_item(question: QuestionSchema, user: UserSchema) -> QuestionListItem:
    stats = question_stats(question.member_responses)
    return QuestionListItem(
        **QuestionResponse.model_validate(question).model_dump(),
        solved_count=stats.solved_count,
        attempted_count=stats.attempted_count,
        total_responses=stats.total_responses,
        user_response=_response_model(question.response_for(user.id)),
        member_difficulty_rating=stats.member_difficulty_rating,
    )


@router.post(
    "/create",
    response_model=QuestionCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("question"))],
)
def create_question(
    payload: QuestionCreateRequest,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> QuestionCreateResponse:
    question = service.create_question(
        user,
        group_id=payload.group_id,
        title=payload.title,
        description=payload.description,
        source_url=payload.source_url,
        difficulty=payload.difficulty,
        category=payload.category,
        tags=payload.tags,
        platform=payload.platform,
    )
    return QuestionCreateResponse(question=QuestionResponse.model_validate(question))


@router.get("/group/{group_id}", response_model=QuestionListResponse)
def list_group_questions(
    group_id: UUID,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    difficulty: Difficulty | None = None,
    category: str | None = None,
    sort_by: QuestionSort = Query(default="createdAt", alias="sortBy"),
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> QuestionListResponse:
    """Page through a group's active questions with per-question solve counts."""

    result = service.list_group_questions(
        user,
        group_id,
        difficulty=difficulty,
        category=category,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return QuestionListResponse(
        questions=[_list_item(question, user) for question in result.questions],
        total_questions=result.total,
        total_pages=result.total_pages,
        current_page=result.page,
    )


@router.get(
    "/search",
    response_model=QuestionCollectionResponse,
    dependencies=[Depends(rate_limit("search"))],
)
def search_questions(
    q: str = Query(default=""),
    group_id: UUID | None = Query(default=None, alias="groupId"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> QuestionCollectionResponse:
    questions = service.search(user, q, group_id=group_id, page=page, limit=limit)
    return QuestionCollectionResponse(
        questions=[QuestionResponse.model_validate(question) for question in questions]
    )


@router.get("/{question_id}", response_model=QuestionViewResponse)
def get_question(
    question_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> QuestionViewResponse:
    question = service.get_question(user, question_id)
    rating = next(
        (entry.rating for entry in question.difficulty_ratings if entry.user_id == user.id),
        None,
    )
    detail = QuestionDetailResponse(
        **QuestionResponse.model_validate(question).model_dump(),
        liked=any(like.user_id == user.id for like in question.likes),
        user_rating=rating,
        user_response=_response_model(question.response_for(user.id)),
        stats=question_stats(question.member_responses),
    )
    return QuestionViewResponse(question=detail)


@router.put("/{question_id}", response_model=QuestionUpdateResponse)
def update_question(
    question_id: UUID,
    payload: QuestionUpdateRequest,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> QuestionUpdateResponse:
    question = service.update_question(
        user, question_id, payload.model_dump(exclude_unset=True)
    )
    return QuestionUpdateResponse(question=QuestionResponse.model_validate(question))


@router.delete("/{question_id}", response_model=MessageResponse)
def delete_question(
    question_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> MessageResponse:
    service.delete_question(user, question_id)
    return MessageResponse(message="Question deleted successfully")


@router.post(
    "/{question_id}/rate",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("vote"))],
)
def rate_question(
    question_id: UUID,
    payload: DifficultyRateRequest,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> MessageResponse:
    service.rate_difficulty(user, question_id, payload.rating)
    return MessageResponse(message="Difficulty rating submitted successfully")


@router.post(
    "/{question_id}/like",
    response_model=LikeToggleResponse,
    dependencies=[Depends(rate_limit("vote"))],
)
def like_question(
    question_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> LikeToggleResponse:
    liked, like_count = service.toggle_like(user, question_id)
    return LikeToggleResponse(
        message="Question liked" if liked else "Question unliked",
        liked=liked,
        like_count=like_count,
    )


@router.post(
    "/{question_id}/solutions",
    response_model=SolutionCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("solution"))],
)
def add_solution(
    question_id: UUID,
    payload: SolutionCreateRequest,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> SolutionCreateResponse:
    solution = service.add_solution(
        user,
        question_id,
        code=payload.code,
        language=payload.language,
        explanation=payload.explanation,
        time_complexity=payload.time_complexity,
        space_complexity=payload.space_complexity,
    )
    return SolutionCreateResponse(solution=SolutionResponse.model_validate(solution))


@router.get("/{question_id}/solutions", response_model=SolutionListResponse)
def list_solutions(
    question_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> SolutionListResponse:
    solutions = service.list_solutions(user, question_id)
    return SolutionListResponse(
        solutions=[SolutionResponse.model_validate(solution) for solution in solutions]
    )


@router.post(
    "/{question_id}/response",
    response_model=ResponseSubmitResponse,
    dependencies=[Depends(rate_limit("response"))],
)
def submit_response(
    question_id: UUID,
    payload: ResponseSubmitRequest,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> ResponseSubmitResponse:
    """Record how the caller fared on the question and return fresh statistics."""

    response, updated, stats = service.submit_response(
        user,
        question_id,
        status=payload.status,
        difficulty_rating=payload.difficulty_rating,
        time_to_solve=payload.time_to_solve,
        notes=payload.notes,
    )
    return ResponseSubmitResponse(
        message="Response updated successfully"
        if updated
        else "Response submitted successfully",
        response=MemberResponseModel.model_validate(response),
        question_stats=stats,
    )


@router.get("/{question_id}/response", response_model=UserResponseResult)
def get_user_response(
    question_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> UserResponseResult:
    response, stats = service.get_user_response(user, question_id)
    return UserResponseResult(response=_response_model(response), question_stats=stats)


@router.get("/{question_id}/responses", response_model=MemberResponsesResult)
def get_member_responses(
    question_id: UUID,
    user: UserSchema = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> MemberResponsesResult:
    breakdown = service.get_member_responses(user, question_id)

    def models(entries: list[MemberResponseSchema]) -> list[MemberResponseModel]:
        return [MemberResponseModel.model_validate(entry) for entry in entries]

    return MemberResponsesResult(
        question=QuestionBrief.model_validate(breakdown.question),
        responses=GroupedResponses(
            solved=models(breakdown.solved),
            attempted=models(breakdown.attempted),
            stuck=models(breakdown.stuck),
        ),
        stats=breakdown.stats,
    )
