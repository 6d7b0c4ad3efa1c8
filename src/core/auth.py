"""Signed session tokens and the role hierarchy."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt
from src.core.config import get_settings


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {role.value for role in cls}

    @property
    def rank(self) -> int:
        return _ROLE_RANKS[self]


_ROLE_RANKS = {Role.USER: 0, Role.ADMIN: 1}


def role_satisfies(actual: Role | str, required: Role | str) -> bool:
    """Return True when ``actual`` grants at least the privileges of ``required``.

    Roles are totally ordered by rank, so ``admin`` satisfies every check.
    Unknown role names never satisfy anything.
    """
    try:
        actual_role = Role(actual)
        required_role = Role(required)
    except ValueError:
        return False
    return actual_role.rank >= required_role.rank


def create_access_token(
    user_id: str,
    *,
    email: str,
    role: Role | str,
    expires_delta: timedelta | None = None,
) -> str:
    """Generate a signed JWT carrying ``{userId, email, role}``."""
    settings = get_settings()

    role_value = role.value if isinstance(role, Role) else role
    if not Role.contains(role_value):
        raise TokenError(f"Unsupported role: {role_value}")

    now = datetime.now(UTC)
    ttl = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)
    payload = {
        "userId": user_id,
        "email": email,
        "role": role_value,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
        "iss": settings.app_name,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT access token (signature, expiry, claims)."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.app_name,
            options={"require": ["userId", "role", "exp", "iss"]},
        )
    except jwt.PyJWTError as exc:
        raise TokenError("Invalid or expired token") from exc

    if not isinstance(payload.get("userId"), str) or not payload["userId"]:
        raise TokenError("Token missing subject")
    if not Role.contains(str(payload.get("role"))):
        raise TokenError(f"Unsupported role: {payload.get('role')}")
    return payload
