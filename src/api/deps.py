from __future__ import annotations

from collections.abc import AsyncIterator, Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import Role, role_satisfies
from src.domain import User
from src.domain.errors import InvalidTokenError
from src.domain.services.auth_service import AuthService
from src.infrastructure.db.session import get_session
from structlog.contextvars import bind_contextvars

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> User:
    """Resolve the authenticated user from a bearer token.

    A missing token is 401; a token that fails verification for any reason
    (signature, expiry, unknown or inactive user) is 403. The resolved user
    is also bound to ``request.state.user``.
    """
    if credentials is None:
        raise _unauthorized("Access token required")

    try:
        account = await AuthService(session).verify_token(credentials.credentials)
    except InvalidTokenError as exc:
        raise _forbidden(str(exc)) from exc

    user = User(
        user_id=account.id,
        email=account.email,
        role=account.role.value,
        first_name=account.first_name,
        last_name=account.last_name,
    )
    request.state.user = user
    bind_contextvars(user_id=user.user_id)
    return user


def require_role(required_role: Role | str) -> Callable[[User], User]:
    """Dependency factory enforcing that the authenticated user holds ``required_role``.

    ``admin`` satisfies every role (see ``role_satisfies``).
    """
    if not Role.contains(required_role.value if isinstance(required_role, Role) else required_role):
        raise ValueError(f"Unsupported role requested: {required_role}")
    required = Role(required_role)

    def dependency(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if not role_satisfies(user.role, required):
            raise _forbidden("Insufficient permissions")
        return user

    return dependency


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
