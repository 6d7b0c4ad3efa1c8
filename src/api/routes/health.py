from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session
from src.core.config import get_settings
from src.infrastructure.db.session import ping_database

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


@router.get("/health", summary="Service health probe")
async def health_check(session: AsyncSession = Depends(get_db_session)) -> dict:
    """Return service metadata and database connectivity. Always 200."""
    settings = get_settings()
    connected = await ping_database(session)

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": "ok" if connected else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "database": "connected" if connected else "disconnected",
    }
    logger.info("health_probe", **payload)
    return payload
