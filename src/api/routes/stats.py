from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_user, get_db_session
from src.api.schemas.stats import (
    CategoriesResponse,
    CategoryItem,
    CategoryStatsItem,
    StatsGroup,
    StatsResponse,
    StatsSummary,
)
from src.core.config import get_settings
from src.domain import User
from src.domain.reference_data import CATEGORY_DEFINITIONS
from src.domain.services.error_events import ErrorEventService, EventFilter
from src.domain.services.statistics import summarize

router = APIRouter(tags=["Statistics"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    limit: int | None = Query(None, ge=1, description="Events considered for the summary"),
    include_resolved: bool = Query(True, description="Count resolved events per category"),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> StatsResponse:
    """Grouped counts over all events plus a dashboard summary of the latest ones."""
    service = ErrorEventService(session)
    groups = await service.group_counts()
    events = await service.list_events(EventFilter(limit=limit))

    summary = summarize(
        events,
        recent_window=timedelta(seconds=get_settings().recent_window_seconds),
        include_resolved=include_resolved,
    )
    return StatsResponse(
        groups=[StatsGroup(**group) for group in groups],
        summary=StatsSummary(
            total=summary.total,
            unresolved=summary.unresolved,
            recent=summary.recent,
            status=summary.status.value,
            categories=[
                CategoryStatsItem(name=item.name, total=item.total, unresolved=item.unresolved)
                for item in summary.categories
            ],
        ),
    )


@router.get("/categories", response_model=CategoriesResponse)
async def list_categories(user: User = Depends(get_current_user)) -> CategoriesResponse:
    """Return the known error categories with their display colours."""
    return CategoriesResponse(
        categories=[
            CategoryItem(name=item.name, description=item.description, color=item.color)
            for item in CATEGORY_DEFINITIONS
        ]
    )
