from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from src.api.schemas.base import CamelModel


class ErrorEventCreate(CamelModel):
    message: str = Field(..., min_length=1)
    severity: str = Field(..., min_length=1, max_length=32, description="low, medium, high or critical")
    category: str = Field(..., min_length=1, max_length=64)
    description: str | None = None
    stack: str | None = None
    url: str | None = None
    user_agent: str | None = None


class ResolveRequest(CamelModel):
    resolve_comment: str = Field(..., min_length=1)
    resolved_by: str | None = Field(
        None, description="Defaults to the caller's display name when omitted"
    )


class ErrorEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    message: str
    severity: str
    category: str
    description: str | None = None
    stack: str | None = None
    url: str | None = None
    user_agent: str | None = None
    resolved: bool
    resolved_at: datetime | None = None
    resolve_comment: str | None = None
    resolved_by: str | None = None
    created_at: datetime
    updated_at: datetime


class ErrorEventEnvelope(BaseModel):
    success: bool = True
    error: ErrorEventResponse


class DeleteErrorsResponse(CamelModel):
    success: bool = True
    deleted_count: int
