from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest
from src.domain.reference_data import KNOWN_CATEGORIES
from src.domain.services.statistics import (
    SystemStatus,
    category_stats,
    count_recent,
    summarize,
    system_status,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@dataclass
class Event:
    category: str
    resolved: bool = False
    created_at: datetime = NOW


@pytest.mark.parametrize(
    ("unresolved", "expected"),
    [
        (0, SystemStatus.HEALTHY),
        (5, SystemStatus.HEALTHY),
        (6, SystemStatus.WARNING),
        (10, SystemStatus.WARNING),
        (11, SystemStatus.CRITICAL),
    ],
)
def test_system_status_thresholds(unresolved: int, expected: SystemStatus) -> None:
    assert system_status(unresolved) is expected


def test_recent_counts_only_unresolved_within_the_hour() -> None:
    events = [
        Event("api", created_at=NOW - timedelta(minutes=5)),
        Event("api", resolved=True, created_at=NOW - timedelta(minutes=5)),
        Event("api", created_at=NOW - timedelta(minutes=61)),
        Event("api", created_at=NOW - timedelta(hours=1)),
    ]

    assert count_recent(events, now=NOW) == 1


def test_recent_treats_naive_timestamps_as_utc() -> None:
    naive = (NOW - timedelta(minutes=10)).replace(tzinfo=None)

    assert count_recent([Event("api", created_at=naive)], now=NOW) == 1


def test_category_stats_respects_resolved_visibility() -> None:
    events = [
        Event("database"),
        Event("database", resolved=True),
        Event("custom"),
    ]

    visible_all = {s.name: s for s in category_stats(events, include_resolved=True)}
    unresolved_only = {s.name: s for s in category_stats(events, include_resolved=False)}

    assert (visible_all["database"].total, visible_all["database"].unresolved) == (2, 1)
    assert (unresolved_only["database"].total, unresolved_only["database"].unresolved) == (1, 1)
    assert visible_all["custom"].total == 1
    assert visible_all["backup"].total == 0
    assert set(KNOWN_CATEGORIES) <= set(visible_all)


def test_summarize_empty_set() -> None:
    summary = summarize([], now=NOW)

    assert (summary.total, summary.unresolved, summary.recent) == (0, 0, 0)
    assert summary.status is SystemStatus.HEALTHY
    assert [s.name for s in summary.categories] == list(KNOWN_CATEGORIES)


def test_summarize_counts() -> None:
    events = [Event("api") for _ in range(7)] + [Event("api", resolved=True)]

    summary = summarize(events, now=NOW)

    assert summary.total == 8
    assert summary.unresolved == 7
    assert summary.recent == 7
    assert summary.status is SystemStatus.WARNING
