"""
Error event store.

Every mutation is a single UPDATE/DELETE keyed by event id (or a single bulk
DELETE), so the database's row atomicity is the only concurrency control:
concurrent resolve/unresolve calls on one event are last-writer-wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain.errors import NotFoundError, ValidationFailedError
from src.domain.reference_data import ALL_CATEGORIES, Severity
from src.infrastructure.db.models import ErrorEventModel

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()


@dataclass(slots=True)
class EventFilter:
    """Equality filters for listing events; ``None`` means unfiltered."""

    resolved: bool | None = None
    category: str | None = None
    limit: int | None = None


class ErrorEventService:
    """Sole writer of error event records."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_events(self, event_filter: EventFilter | None = None) -> list[ErrorEventModel]:
        """Return events newest first, bounded by the filter's limit."""
        event_filter = event_filter or EventFilter()
        limit = event_filter.limit
        if limit is None:
            limit = get_settings().default_error_limit

        stmt: Select[tuple[ErrorEventModel]] = (
            select(ErrorEventModel).order_by(ErrorEventModel.created_at.desc()).limit(limit)
        )
        if event_filter.resolved is not None:
            stmt = stmt.where(ErrorEventModel.resolved.is_(event_filter.resolved))
        if event_filter.category and event_filter.category != ALL_CATEGORIES:
            stmt = stmt.where(ErrorEventModel.category == event_filter.category)

        return list((await self.session.execute(stmt)).scalars().all())

    async def create_event(
        self,
        *,
        message: str,
        severity: str,
        category: str,
        description: str | None = None,
        stack: str | None = None,
        url: str | None = None,
        user_agent: str | None = None,
    ) -> ErrorEventModel:
        """Insert an unresolved event and return the persisted row."""
        missing = {
            field: f"{field} is required"
            for field, value in (("message", message), ("severity", severity), ("category", category))
            if not value or not value.strip()
        }
        if missing:
            raise ValidationFailedError("Invalid error event", details=missing)

        event = ErrorEventModel(
            message=message,
            severity=severity,
            category=category,
            description=description,
            stack=stack,
            url=url,
            user_agent=user_agent,
            resolved=False,
        )
        if not Severity.contains(severity):
            await logger.ainfo("error_event_unrecognised_severity", severity=severity)

        self.session.add(event)
        await self.session.commit()
        await self.session.refresh(event)

        await logger.ainfo(
            "error_event_created",
            event_id=event.id,
            category=event.category,
            severity=event.severity,
        )
        return event

    async def resolve(self, event_id: str, *, comment: str, resolved_by: str) -> ErrorEventModel:
        """Mark an event resolved, setting all resolution metadata at once."""
        details = {}
        if not comment or not comment.strip():
            details["resolveComment"] = "A resolution comment is required"
        if not resolved_by or not resolved_by.strip():
            details["resolvedBy"] = "The resolver's name is required"
        if details:
            raise ValidationFailedError("Invalid resolution", details=details)

        now = datetime.now(UTC)
        event = await self._apply_transition(
            event_id,
            resolved=True,
            resolved_at=now,
            resolve_comment=comment.strip(),
            resolved_by=resolved_by.strip(),
            updated_at=now,
        )
        await logger.ainfo(
            "error_event_resolved", event_id=event_id, resolved_by=event.resolved_by
        )
        return event

    async def unresolve(self, event_id: str) -> ErrorEventModel:
        """Clear all resolution metadata. Repeating it is harmless."""
        event = await self._apply_transition(
            event_id,
            resolved=False,
            resolved_at=None,
            resolve_comment=None,
            resolved_by=None,
            updated_at=datetime.now(UTC),
        )
        await logger.ainfo("error_event_unresolved", event_id=event_id)
        return event

    async def delete_all(self) -> int:
        """Remove every event. Callers must already hold the admin role."""
        result = await self.session.execute(delete(ErrorEventModel))
        await self.session.commit()

        deleted = result.rowcount or 0
        await logger.awarning("error_events_cleared", deleted_count=deleted)
        return deleted

    async def group_counts(self) -> list[dict[str, Any]]:
        """Count events grouped by category, severity and resolution state."""
        stmt = (
            select(
                ErrorEventModel.category,
                ErrorEventModel.severity,
                ErrorEventModel.resolved,
                func.count(ErrorEventModel.id),
            )
            .group_by(ErrorEventModel.category, ErrorEventModel.severity, ErrorEventModel.resolved)
            .order_by(ErrorEventModel.category, ErrorEventModel.severity, ErrorEventModel.resolved)
        )
        rows: Sequence[Any] = (await self.session.execute(stmt)).all()
        return [
            {"category": category, "severity": severity, "resolved": bool(resolved), "count": count}
            for category, severity, resolved, count in rows
        ]

    async def _apply_transition(self, event_id: str, **values: Any) -> ErrorEventModel:
        result = await self.session.execute(
            update(ErrorEventModel)
            .where(ErrorEventModel.id == event_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFoundError(f"Error event {event_id} not found")
        await self.session.commit()

        event = await self.session.get(ErrorEventModel, event_id, populate_existing=True)
        if event is None:  # deleted between the update and the read-back
            raise NotFoundError(f"Error event {event_id} not found")
        return event
