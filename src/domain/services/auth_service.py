"""Identity service: registration, login, token issuance and verification."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from functools import lru_cache

import structlog
from email_validator import EmailNotValidError, validate_email
from passlib.context import CryptContext
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import TokenError, create_access_token, decode_access_token
from src.core.config import get_settings
from src.domain.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ValidationFailedError,
)
from src.infrastructure.db.models import UserModel, UserRole

logger = structlog.get_logger()

MIN_PASSWORD_LENGTH = 8
_PASSWORD_RULES = (
    (re.compile(r"[a-z]"), "a lowercase letter"),
    (re.compile(r"[A-Z]"), "an uppercase letter"),
    (re.compile(r"\d"), "a number"),
)


@lru_cache
def _password_context() -> CryptContext:
    # bcrypt cost comes from settings so tests can lower it
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__default_rounds=get_settings().bcrypt_rounds,
    )


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return _password_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return _password_context().verify(plain_password, hashed_password)


def validate_password_strength(password: str) -> None:
    """Require 8+ characters mixing upper case, lower case and digits."""
    missing = [label for pattern, label in _PASSWORD_RULES if not pattern.search(password)]
    if len(password) < MIN_PASSWORD_LENGTH:
        missing.insert(0, f"at least {MIN_PASSWORD_LENGTH} characters")
    if missing:
        raise ValidationFailedError(
            "Password does not meet complexity requirements",
            details={"password": "Password must contain " + ", ".join(missing)},
        )


def normalize_email(email: str) -> str:
    """Validate an address and return its lower-cased canonical form."""
    try:
        validated = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationFailedError(
            "Invalid email address", details={"email": str(exc)}
        ) from exc
    return validated.normalized.lower()


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def register_user(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.USER,
    ) -> dict:
        """
        Register a new active user and issue a token.

        Returns:
            dict with user data and token
        """
        normalized_email = normalize_email(email)
        validate_password_strength(password)
        await logger.ainfo("register_attempt", email=normalized_email, role=role.value)

        existing = await self._find_by_email(normalized_email)
        if existing is not None:
            await logger.awarning("register_duplicate_email", email=normalized_email)
            raise ConflictError("Email already registered")

        user = UserModel(
            email=normalized_email,
            hashed_password=hash_password(password),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            role=role,
            is_active=True,
        )

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration of the same address
            await self.session.rollback()
            await logger.awarning("register_duplicate_email", email=normalized_email)
            raise ConflictError("Email already registered") from exc

        token = self.issue_token(user)
        await logger.ainfo("register_success", user_id=user.id, email=normalized_email)

        return {"user": self._user_to_dict(user), "token": token}

    async def login(self, *, email: str, password: str) -> dict:
        """
        Authenticate an active user with email and password.

        Unknown addresses, inactive accounts and wrong passwords all fail the
        same way.
        """
        normalized_email = email.strip().lower()
        await logger.ainfo("login_attempt", email=normalized_email)

        stmt = select(UserModel).where(
            UserModel.email == normalized_email,
            UserModel.is_active.is_(True),
        )
        user = (await self.session.execute(stmt)).scalar_one_or_none()

        if user is None:
            # Spend the same hashing time as a real comparison
            _password_context().dummy_verify()
            await logger.awarning("login_user_not_found", email=normalized_email)
            raise InvalidCredentialsError("Invalid email or password")

        if not verify_password(password, user.hashed_password):
            await logger.awarning("login_invalid_password", email=normalized_email)
            raise InvalidCredentialsError("Invalid email or password")

        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(last_login_at=datetime.now(UTC))
        )
        await self.session.commit()
        await self.session.refresh(user)

        token = self.issue_token(user)
        await logger.ainfo("login_success", user_id=user.id, email=normalized_email)

        return {"user": self._user_to_dict(user), "token": token}

    def issue_token(self, user: UserModel) -> str:
        """Sign a token asserting the user's id, email and role."""
        return create_access_token(user.id, email=user.email, role=user.role.value)

    async def verify_token(self, token: str) -> UserModel:
        """
        Decode a token and re-check that its user still exists and is active.

        The user is fetched on every call so deactivation takes effect
        immediately.
        """
        try:
            payload = decode_access_token(token)
        except TokenError as exc:
            raise InvalidTokenError("Invalid or expired token") from exc

        stmt = select(UserModel).where(
            UserModel.id == payload["userId"],
            UserModel.is_active.is_(True),
        )
        user = (await self.session.execute(stmt)).scalar_one_or_none()
        if user is None:
            await logger.awarning("token_user_rejected", user_id=payload["userId"])
            raise InvalidTokenError("Invalid or expired token")
        return user

    async def get_user_by_id(self, user_id: str) -> dict:
        """Get user by ID."""
        user = await self.session.get(UserModel, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return self._user_to_dict(user)

    async def set_active(self, *, user_id: str, is_active: bool) -> dict:
        """Activate or deactivate an account."""
        result = await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(is_active=is_active, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFoundError(f"User {user_id} not found")
        await self.session.commit()

        user = await self.session.get(UserModel, user_id, populate_existing=True)
        await logger.ainfo("user_active_changed", user_id=user_id, is_active=is_active)
        return self._user_to_dict(user)

    async def _find_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.email == email)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    def _user_to_dict(self, user: UserModel) -> dict:
        """Convert UserModel to dict for response."""
        return {
            "id": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "role": user.role.value,
            "is_active": user.is_active,
            "last_login": user.last_login_at,
            "created_at": user.created_at,
        }
