from __future__ import annotations

from typing import Any

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.domain.services.auth_service import AuthService
from src.infrastructure.db.models import UserRole

DEFAULT_PASSWORD = "Secret123"


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def create_account(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    email: str,
    password: str = DEFAULT_PASSWORD,
    first_name: str = "Test",
    last_name: str = "User",
    role: UserRole = UserRole.USER,
) -> dict[str, Any]:
    """Register an account straight through the service; returns ``{user, token}``."""
    async with session_factory() as session:
        return await AuthService(session).register_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=role,
        )


async def report_error(
    client: AsyncClient,
    headers: dict[str, str],
    *,
    message: str = "Database connection timeout",
    severity: str = "high",
    category: str = "database",
    **extra: Any,
) -> dict[str, Any]:
    """POST /api/errors and return the stored event."""
    response = await client.post(
        "/api/errors",
        json={"message": message, "severity": severity, "category": category, **extra},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()["error"]
