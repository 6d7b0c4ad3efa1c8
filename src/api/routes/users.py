from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session, require_role
from src.api.schemas.auth import MeResponse, UserActiveRequest, UserResponse
from src.core.auth import Role
from src.domain import User
from src.domain.errors import NotFoundError
from src.domain.services.auth_service import AuthService

router = APIRouter(prefix="/users", tags=["Users"])
logger = structlog.get_logger()


@router.patch("/{user_id}/active", response_model=MeResponse)
async def set_user_active(
    user_id: str,
    payload: UserActiveRequest,
    session: AsyncSession = Depends(get_db_session),
    admin: User = Depends(require_role(Role.ADMIN)),
) -> MeResponse:
    """Activate or deactivate an account (admin-only). Takes effect on the next request."""
    try:
        user_data = await AuthService(session).set_active(
            user_id=user_id, is_active=payload.is_active
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    logger.info(
        "user_active_updated",
        target_user=user_id,
        admin_user=admin.user_id,
        is_active=payload.is_active,
    )
    return MeResponse(user=UserResponse(**user_data))
