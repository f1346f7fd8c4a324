"""Domain errors raised by services and translated to HTTP responses."""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for expected failures that map onto an HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    """Raised when a request is well-formed but breaks a business rule."""


class NotFoundError(ServiceError):
    """Raised when the addressed resource does not exist or is not visible."""

    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(ServiceError):
    """Raised when the caller lacks the role or membership an action needs."""

    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class UserAlreadyExistsError(ConflictError):
    """Raised when attempting to create a duplicate user."""

    def __init__(self, email: str) -> None:
        super().__init__("User already exists")
        self.email = email


class InvalidCredentialsError(ServiceError):
    """Raised when supplied credentials are invalid."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, email: str) -> None:
        super().__init__("Invalid credentials")
        self.email = email
