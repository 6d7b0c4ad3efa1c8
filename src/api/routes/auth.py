"""Authentication routes - register, login, logout, profile."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session
from src.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    MeResponse,
    RegisterRequest,
    UserResponse,
)
from src.domain import User
from src.domain.errors import ConflictError, InvalidCredentialsError, NotFoundError
from src.domain.services.auth_service import AuthService

logger = structlog.get_logger()
router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a user account with role `user` and return a bearer token.",
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    """Register a new user."""
    service = AuthService(session)

    try:
        result = await service.register_user(
            email=payload.email,
            password=payload.password,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
    except ConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return AuthResponse(
        message="Account created successfully",
        user=UserResponse(**result["user"]),
        token=result["token"],
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
    description="Authenticate with email and password, returns a bearer token.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    """Authenticate user and return a token."""
    service = AuthService(session)

    try:
        result = await service.login(email=payload.email, password=payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    return AuthResponse(
        message="Login successful",
        user=UserResponse(**result["user"]),
        token=result["token"],
    )


@router.post("/logout", response_model=LogoutResponse, summary="User logout")
async def logout(user: User = Depends(get_current_user)) -> LogoutResponse:
    """Acknowledge a logout; tokens are stateless so the client simply drops it."""
    logger.info("logout", user_id=user.user_id)
    return LogoutResponse()


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user",
    description="Get the currently authenticated user's profile.",
)
async def get_me(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    """Get current authenticated user's profile."""
    service = AuthService(session)

    try:
        user_data = await service.get_user_by_id(user.user_id)
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return MeResponse(user=UserResponse(**user_data))
