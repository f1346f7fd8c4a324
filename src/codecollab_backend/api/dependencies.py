"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from codecollab_backend.api.services import (
    AuthService,
    FeedbackService,
    GroupService,
    QuestionService,
)
from codecollab_backend.database import UserRepository, UserSchema, get_session

_security = HTTPBearer(auto_error=False)


def get_auth_service() -> AuthService:
    """Return an :class:`AuthService` bound to the current settings."""

    return AuthService()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserSchema:
    """Resolve the authenticated user from a bearer token."""

    if credentials is None:
        raise _unauthorized("Missing credentials")

    try:
        payload = auth_service.decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError as exc:
        raise _unauthorized("Token expired") from exc
    except jwt.PyJWTError as exc:
        raise _unauthorized("Invalid token") from exc

    repository = UserRepository(session)
    try:
        user_id = UUID(payload.sub)
    except ValueError as exc:
        raise _unauthorized("Invalid token subject") from exc

    user = repository.get_by_id(user_id)
    if user is None or not user.is_active:
        raise _unauthorized("User not found or inactive")

    if user.password_changed_at is not None and payload.iat < user.password_changed_at:
        raise _unauthorized("Password recently changed, please log in again")

    return user


def get_group_service(session: Session = Depends(get_session)) -> GroupService:
    return GroupService(session)


def get_question_service(session: Session = Depends(get_session)) -> QuestionService:
    return QuestionService(session)


def get_feedback_service(session: Session = Depends(get_session)) -> FeedbackService:
    return FeedbackService(session)


__all__ = [
    "get_auth_service",
    "get_current_user",
    "get_feedback_service",
    "get_group_service",
    "get_question_service",
]
