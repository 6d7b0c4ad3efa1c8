from __future__ import annotations

from pydantic import BaseModel


class StatsGroup(BaseModel):
    category: str
    severity: str
    resolved: bool
    count: int


class CategoryStatsItem(BaseModel):
    name: str
    total: int
    unresolved: int


class StatsSummary(BaseModel):
    total: int
    unresolved: int
    recent: int
    status: str
    categories: list[CategoryStatsItem]


class StatsResponse(BaseModel):
    groups: list[StatsGroup]
    summary: StatsSummary


class CategoryItem(BaseModel):
    name: str
    description: str
    color: str


class CategoriesResponse(BaseModel):
    categories: list[CategoryItem]
