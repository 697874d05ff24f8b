"""
Render-ready view models.

These are the shapes handed to presentation (the MCP tool formatters):
an ordered sequence of task records plus category counts, and the
calendar/analytics summaries.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from taskflow_mcp.constants import FilterMode, SortKey, TaskPriority
from taskflow_mcp.models.category import Category, CategoryCounts


class TaskView(BaseModel):
    """A view-ready task record."""

    id: str
    title: str
    description: str | None
    due_date: datetime | None
    priority: TaskPriority
    completed: bool
    created_at: datetime
    due_label: str
    status_label: str


class TaskListView(BaseModel):
    """Ordered projection of the filtered, sorted task set."""

    heading: str
    filter_mode: FilterMode
    search_term: str = ""
    sort_key: SortKey
    tasks: list[TaskView] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    counts: CategoryCounts = Field(default_factory=CategoryCounts)
    total_count: int = 0

    @property
    def shown_count(self) -> int:
        return len(self.tasks)


class PriorityBreakdown(BaseModel):
    """Task count for one priority level."""

    priority: TaskPriority
    count: int
    color: str


class DailyTaskStats(BaseModel):
    """Tasks created on one day, and how many of those are completed."""

    day: date
    label: str
    date_label: str
    total: int = 0
    completed: int = 0


class TaskStatistics(BaseModel):
    """Analytics summary over a user's full task set."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    completion_rate: int = 0
    by_priority: list[PriorityBreakdown] = Field(default_factory=list)
    daily: list[DailyTaskStats] = Field(default_factory=list)
