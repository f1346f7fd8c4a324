"""Account and authentication endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from codecollab_backend.api.dependencies import get_auth_service, get_current_user
from codecollab_backend.api.models import (
    AuthTokenResponse,
    MessageResponse,
    PasswordChangeRequest,
    PasswordChangeResponse,
    ProfileUpdateRequest,
    PublicUserResponse,
    UserLoginRequest,
    UserLoginResponse,
    UserRegisterRequest,
    UserRegisterResponse,
    UserResponse,
)
from codecollab_backend.api.rate_limit import rate_limit, rate_limit_failures
from codecollab_backend.api.services import (
    AuthService,
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from codecollab_backend.database import UserRepository, UserSchema, get_session

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "/register",
    response_model=UserRegisterResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("register"))],
)
def register_user(
    payload: UserRegisterRequest,
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserRegisterResponse:
    """Register a new user and issue an access token."""

    try:
        user, token = auth_service.register_user(
            session=session,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            avatar=payload.avatar,
        )
    except UserAlreadyExistsError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists with this email",
        ) from exc

    user_model = UserResponse.model_validate(user, from_attributes=True)
    token_model = AuthTokenResponse(access_token=token)
    return UserRegisterResponse(user=user_model, token=token_model)


@router.post(
    "/login",
    response_model=UserLoginResponse,
    dependencies=[Depends(rate_limit_failures("login"))],
)
def login_user(
    payload: UserLoginRequest,
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserLoginResponse:
    """Authenticate an existing user using email and password."""

    try:
        user, token = auth_service.authenticate_user(
            session=session, email=payload.email, password=payload.password
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        ) from exc

    user_model = UserResponse.model_validate(user, from_attributes=True)
    token_model = AuthTokenResponse(access_token=token)
    return UserLoginResponse(user=user_model, token=token_model)


@router.get("/profile", response_model=UserResponse)
def get_profile(user: UserSchema = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user, from_attributes=True)


@router.put(
    "/profile",
    response_model=UserResponse,
    dependencies=[Depends(rate_limit("profile"))],
)
def update_profile(
    payload: ProfileUpdateRequest,
    user: UserSchema = Depends(get_current_user),
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    updated = auth_service.update_profile(
        session=session, user=user, name=payload.name, avatar=payload.avatar
    )
    return UserResponse.model_validate(updated, from_attributes=True)


@router.post(
    "/change-password",
    response_model=PasswordChangeResponse,
    dependencies=[Depends(rate_limit("profile"))],
)
def change_password(
    payload: PasswordChangeRequest,
    user: UserSchema = Depends(get_current_user),
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> PasswordChangeResponse:
    """Replace the caller's password; previously issued tokens stop working."""

    try:
        token = auth_service.change_password(
            session=session,
            user=user,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        ) from exc

    return PasswordChangeResponse(token=AuthTokenResponse(access_token=token))


@router.delete("/account", response_model=MessageResponse)
def delete_account(
    user: UserSchema = Depends(get_current_user),
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    auth_service.deactivate_user(session=session, user=user)
    return MessageResponse(message="Account deactivated successfully")


@router.get("/{user_id}", response_model=PublicUserResponse)
def get_user(
    user_id: UUID,
    _: UserSchema = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> PublicUserResponse:
    """Return another user's public profile."""

    user = UserRepository(session).get_by_id(user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return PublicUserResponse.model_validate(user, from_attributes=True)
