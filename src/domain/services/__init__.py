"""Domain services."""

from src.domain.services.auth_service import AuthService
from src.domain.services.error_events import ErrorEventService, EventFilter
from src.domain.services.statistics import (
    CategoryStats,
    EventSummary,
    SystemStatus,
    summarize,
    system_status,
)

__all__ = [
    "AuthService",
    "CategoryStats",
    "ErrorEventService",
    "EventFilter",
    "EventSummary",
    "SystemStatus",
    "summarize",
    "system_status",
]
