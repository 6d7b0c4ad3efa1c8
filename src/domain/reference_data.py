from __future__ import annotations

from enum import Enum

from src.domain.models import CategoryDefinition


class Severity(str, Enum):
    """Recognised severities; other labels are stored verbatim."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {severity.value for severity in cls}


CATEGORY_DEFINITIONS: tuple[CategoryDefinition, ...] = (
    CategoryDefinition("database", "Database related errors", "#fed7d7"),
    CategoryDefinition("api", "API and external service errors", "#feebc8"),
    CategoryDefinition("security", "Authentication and security errors", "#fbb6ce"),
    CategoryDefinition("filesystem", "File and storage errors", "#c6f6d5"),
    CategoryDefinition("performance", "Performance and memory issues", "#bee3f8"),
    CategoryDefinition("network", "Network connectivity errors", "#e9d8fd"),
    CategoryDefinition("system", "System resource errors", "#fed7e2"),
    CategoryDefinition("external", "Third-party service errors", "#fefcbf"),
    CategoryDefinition("cache", "Caching system errors", "#c6f6d5"),
    CategoryDefinition("infrastructure", "Infrastructure and deployment errors", "#fed7d7"),
    CategoryDefinition("backup", "Backup and recovery errors", "#e6fffa"),
)

KNOWN_CATEGORIES: tuple[str, ...] = tuple(sorted(c.name for c in CATEGORY_DEFINITIONS))

# Filter value meaning "no category filter"
ALL_CATEGORIES = "all"
