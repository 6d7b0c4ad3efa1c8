"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field
from src.api.schemas.base import CamelModel

# --- Request Schemas ---


class RegisterRequest(CamelModel):
    """Request schema for user registration."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (min 8 characters, mixed case and a number)",
    )
    first_name: str = Field(..., min_length=1, max_length=100, description="Given name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Family name")


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class UserActiveRequest(CamelModel):
    """Request schema for activating or deactivating an account."""

    is_active: bool


# --- Response Schemas ---


class UserResponse(CamelModel):
    """Response schema for user data."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    first_name: str
    last_name: str
    role: str = Field(..., description="User role")
    is_active: bool
    last_login: datetime | None = Field(None, description="Last login timestamp")
    created_at: datetime = Field(..., description="Account creation timestamp")


class AuthResponse(CamelModel):
    """Response schema for registration and login."""

    success: bool = True
    message: str
    user: UserResponse
    token: str = Field(..., description="Signed bearer token")


class MeResponse(CamelModel):
    """Response schema for current user info."""

    user: UserResponse


class LogoutResponse(CamelModel):
    success: bool = True
    message: str = "Logged out successfully"
