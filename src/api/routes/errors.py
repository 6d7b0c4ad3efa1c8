from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session, require_role
from src.api.schemas.errors import (
    DeleteErrorsResponse,
    ErrorEventCreate,
    ErrorEventEnvelope,
    ErrorEventResponse,
    ResolveRequest,
)
from src.core.auth import Role
from src.domain import User
from src.domain.errors import NotFoundError
from src.domain.services.error_events import ErrorEventService, EventFilter

router = APIRouter(prefix="/errors", tags=["Errors"])
logger = structlog.get_logger()


@router.get("", response_model=list[ErrorEventResponse])
async def list_errors(
    resolved: bool | None = Query(None, description="Only resolved (true) or unresolved (false)"),
    category: str | None = Query(None, description="Category label, or 'all'"),
    limit: int | None = Query(None, ge=1, description="Maximum number of events (default 100)"),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> list[ErrorEventResponse]:
    """List error events, newest first."""
    events = await ErrorEventService(session).list_events(
        EventFilter(resolved=resolved, category=category, limit=limit)
    )
    return [ErrorEventResponse.model_validate(event) for event in events]


@router.post("", response_model=ErrorEventEnvelope)
async def create_error(
    payload: ErrorEventCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> ErrorEventEnvelope:
    """Record a new, unresolved error event."""
    event = await ErrorEventService(session).create_event(
        message=payload.message,
        severity=payload.severity,
        category=payload.category,
        description=payload.description,
        stack=payload.stack,
        url=payload.url,
        user_agent=payload.user_agent,
    )
    logger.info("error_event_reported", event_id=event.id, reporter=user.user_id)
    return ErrorEventEnvelope(error=ErrorEventResponse.model_validate(event))


@router.patch("/{event_id}/resolve", response_model=ErrorEventEnvelope)
async def resolve_error(
    event_id: str,
    payload: ResolveRequest,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> ErrorEventEnvelope:
    """Mark an event resolved with the caller's comment."""
    resolved_by = (payload.resolved_by or "").strip() or user.display_name or user.email
    try:
        event = await ErrorEventService(session).resolve(
            event_id, comment=payload.resolve_comment, resolved_by=resolved_by
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Error not found") from exc

    return ErrorEventEnvelope(error=ErrorEventResponse.model_validate(event))


@router.patch("/{event_id}/unresolve", response_model=ErrorEventEnvelope)
async def unresolve_error(
    event_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> ErrorEventEnvelope:
    """Reopen an event, clearing its resolution metadata."""
    try:
        event = await ErrorEventService(session).unresolve(event_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Error not found") from exc

    return ErrorEventEnvelope(error=ErrorEventResponse.model_validate(event))


@router.delete("", response_model=DeleteErrorsResponse)
async def delete_errors(
    session: AsyncSession = Depends(get_db_session),
    admin: User = Depends(require_role(Role.ADMIN)),
) -> DeleteErrorsResponse:
    """Irreversibly remove every error event (admin-only)."""
    deleted = await ErrorEventService(session).delete_all()
    logger.warning("error_events_deleted", admin_user=admin.user_id, deleted_count=deleted)
    return DeleteErrorsResponse(deleted_count=deleted)
