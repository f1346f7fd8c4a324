"""Authentication domain logic."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Tuple
from uuid import uuid4

import jwt
from sqlalchemy.orm import Session

from codecollab_backend.api.services.errors import (
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from codecollab_backend.database import UserRepository, UserSchema
from codecollab_backend.settings import BackendSettings, get_settings
from codecollab_backend.shared import utc_now

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TokenPayload:
    """Represents encoded token metadata."""

    sub: str
    iat: datetime
    exp: datetime


class AuthService:
    """Handles password hashing, token generation and account lifecycle."""

    def __init__(
        self,
        *,
        secret_key: str | None = None,
        algorithm: str = "HS256",
        access_token_ttl_minutes: int | None = None,
        settings: BackendSettings | None = None,
    ) -> None:
        config = settings or get_settings()
        self._secret_key = secret_key or config.auth_secret_key
        self._algorithm = algorithm
        self._access_token_ttl = timedelta(
            minutes=access_token_ttl_minutes or config.access_token_ttl_minutes
        )

    def hash_password(self, password: str) -> str:
        """Hash a password using PBKDF2 with a random salt."""

        salt = secrets.token_bytes(16)
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, 100_000)
        return f"{base64.b64encode(salt).decode()}:{base64.b64encode(digest).decode()}"

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Validate a password against a stored PBKDF2 hash."""

        try:
            salt_b64, hash_b64 = password_hash.split(":", 1)
        except ValueError:
            return False
        salt = base64.b64decode(salt_b64.encode())
        expected = base64.b64decode(hash_b64.encode())
        actual = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, 100_000)
        return hmac.compare_digest(actual, expected)

    def create_access_token(self, subject: str) -> str:
        issued_at = datetime.now(tz=timezone.utc)
        payload = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + self._access_token_ttl,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_access_token(self, token: str) -> TokenPayload:
        data = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        return TokenPayload(
            sub=data["sub"],
            iat=datetime.fromtimestamp(data.get("iat", 0), tz=timezone.utc),
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
        )

    def register_user(
        self,
        *,
        session: Session,
        name: str,
        email: str,
        password: str,
        avatar: str = "",
    ) -> Tuple[UserSchema, str]:
        repository = UserRepository(session)
        if repository.get_by_email(email) is not None:
            raise UserAlreadyExistsError(email)

        password_hash = self.hash_password(password)
        user = UserSchema(
            id=uuid4(),
            name=name.strip(),
            email=email.lower(),
            password_hash=password_hash,
            avatar=avatar,
        )
        user = repository.add(user)
        logger.info("Registered user %s", user.id)
        token = self.create_access_token(str(user.id))
        return user, token

    def authenticate_user(
        self, *, session: Session, email: str, password: str
    ) -> Tuple[UserSchema, str]:
        repository = UserRepository(session)
        user = repository.get_by_email(email)
        if (
            user is None
            or not user.is_active
            or not self.verify_password(password, user.password_hash)
        ):
            raise InvalidCredentialsError(email)
        token = self.create_access_token(str(user.id))
        return user, token

    def update_profile(
        self,
        *,
        session: Session,
        user: UserSchema,
        name: str | None = None,
        avatar: str | None = None,
    ) -> UserSchema:
        if name is not None:
            user.name = name.strip()
        if avatar is not None:
            user.avatar = avatar
        return UserRepository(session).save(user)

    def change_password(
        self,
        *,
        session: Session,
        user: UserSchema,
        current_password: str,
        new_password: str,
    ) -> str:
        """Replace *user*'s password and return a token issued after the change."""
        if not self.verify_password(current_password, user.password_hash):
            raise InvalidCredentialsError(user.email)
        user.password_hash = self.hash_password(new_password)
        # Tokens carry whole-second iat values; truncate so the fresh token stays valid.
        user.password_changed_at = utc_now().replace(microsecond=0)
        UserRepository(session).save(user)
        logger.info("Password changed for user %s", user.id)
        return self.create_access_token(str(user.id))

    def deactivate_user(self, *, session: Session, user: UserSchema) -> None:
        user.is_active = False
        UserRepository(session).save(user)
        logger.info("Deactivated user %s", user.id)
