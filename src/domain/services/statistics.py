"""
Statistics derived from an in-memory set of error events.

Nothing here touches the database or keeps state: callers pass whatever
events they currently hold (typically the result of a list query) and get
fresh counts back.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Protocol

from src.domain.reference_data import KNOWN_CATEGORIES

CRITICAL_UNRESOLVED_THRESHOLD = 10
WARNING_UNRESOLVED_THRESHOLD = 5
RECENT_WINDOW = timedelta(hours=1)


class SystemStatus(str, Enum):
    CRITICAL = "Critical"
    WARNING = "Warning"
    HEALTHY = "Healthy"


class EventLike(Protocol):
    category: str
    resolved: bool
    created_at: datetime


@dataclass(slots=True)
class CategoryStats:
    name: str
    total: int
    unresolved: int


@dataclass(slots=True)
class EventSummary:
    total: int
    unresolved: int
    recent: int
    status: SystemStatus
    categories: list[CategoryStats] = field(default_factory=list)


def system_status(unresolved: int) -> SystemStatus:
    """Map an unresolved count onto the Critical / Warning / Healthy label."""
    if unresolved > CRITICAL_UNRESOLVED_THRESHOLD:
        return SystemStatus.CRITICAL
    if unresolved > WARNING_UNRESOLVED_THRESHOLD:
        return SystemStatus.WARNING
    return SystemStatus.HEALTHY


def count_unresolved(events: Iterable[EventLike]) -> int:
    return sum(1 for event in events if not event.resolved)


def count_recent(
    events: Iterable[EventLike],
    *,
    now: datetime | None = None,
    window: timedelta = RECENT_WINDOW,
) -> int:
    """Count unresolved events created strictly within ``window`` of ``now``."""
    cutoff = _as_utc(now or datetime.now(UTC)) - window
    return sum(
        1 for event in events if not event.resolved and _as_utc(event.created_at) > cutoff
    )


def category_stats(
    events: Sequence[EventLike],
    *,
    include_resolved: bool = True,
    categories: Iterable[str] = KNOWN_CATEGORIES,
) -> list[CategoryStats]:
    """Per-category totals under the current resolved-visibility setting.

    Every name in ``categories`` is reported, even with zero events, along
    with any other category that appears in ``events``.
    """
    names = sorted(set(categories) | {event.category for event in events})
    stats = []
    for name in names:
        visible = [
            event
            for event in events
            if event.category == name and (include_resolved or not event.resolved)
        ]
        stats.append(
            CategoryStats(name=name, total=len(visible), unresolved=count_unresolved(visible))
        )
    return stats


def summarize(
    events: Sequence[EventLike],
    *,
    now: datetime | None = None,
    recent_window: timedelta = RECENT_WINDOW,
    include_resolved: bool = True,
    categories: Iterable[str] = KNOWN_CATEGORIES,
) -> EventSummary:
    unresolved = count_unresolved(events)
    return EventSummary(
        total=len(events),
        unresolved=unresolved,
        recent=count_recent(events, now=now, window=recent_window),
        status=system_status(unresolved),
        categories=category_stats(
            events, include_resolved=include_resolved, categories=categories
        ),
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
