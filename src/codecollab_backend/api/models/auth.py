"""Pydantic models for account and authentication endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from codecollab_backend.shared import CamelModel, UserRole

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64


def _check_password_strength(value: str) -> str:
    if not any(char.isalpha() for char in value):
        msg = "password must contain at least one letter"
        raise ValueError(msg)
    if not any(char.isdigit() for char in value):
        msg = "password must contain at least one digit"
        raise ValueError(msg)
    return value


class UserSummary(CamelModel):
    """Minimal user card embedded in other resources."""

    id_: UUID = Field(alias="id")
    name: str
    avatar: str = ""


class PublicUserResponse(UserSummary):
    created_at: datetime


class UserResponse(CamelModel):
    """Full representation of the authenticated user."""

    id_: UUID = Field(alias="id")
    name: str
    email: str
    avatar: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AuthTokenResponse(CamelModel):
    """Bearer token payload returned by the API."""

    access_token: str
    token_type: str = "bearer"


class UserRegisterRequest(CamelModel):
    """Payload for creating a new user."""

    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(
        min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )
    avatar: str = Field(default="", max_length=500)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if len(value.strip()) < NAME_MIN_LENGTH:
            msg = "name must not be blank"
            raise ValueError(msg)
        return value.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password_strength(value)


class UserRegisterResponse(CamelModel):
    """Response returned after a successful registration."""

    message: str = "User registered successfully"
    user: UserResponse
    token: AuthTokenResponse


class UserLoginRequest(CamelModel):
    """Payload for authenticating an existing user."""

    email: str = Field(pattern=EMAIL_PATTERN, max_length=254)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserLoginResponse(CamelModel):
    """Response returned after a successful authentication."""

    message: str = "Login successful"
    user: UserResponse
    token: AuthTokenResponse


class ProfileUpdateRequest(CamelModel):
    name: str | None = Field(
        default=None, min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH
    )
    avatar: str | None = Field(default=None, max_length=500)


class PasswordChangeRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(
        min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return _check_password_strength(value)


class PasswordChangeResponse(CamelModel):
    message: str = "Password changed successfully"
    token: AuthTokenResponse
