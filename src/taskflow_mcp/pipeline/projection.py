"""
Projection stage.

Builds the render contract: ordered view-ready task records plus the
category counts of the full set.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from taskflow_mcp.constants import FilterMode, SortKey
from taskflow_mcp.models import CategoryCounts, Task, TaskListView, TaskView
from taskflow_mcp.pipeline.aggregate import aggregate, build_categories
from taskflow_mcp.pipeline.filters import filter_tasks
from taskflow_mcp.pipeline.sorting import sort_tasks


def format_due_label(due_date: datetime | None, today: date) -> str:
    if due_date is None:
        return "No due date"
    day = due_date.date()
    if day == today:
        return "Due Today"
    if day == today + timedelta(days=1):
        return "Due Tomorrow"
    if day == today - timedelta(days=1):
        return "Due Yesterday"
    return f"Due {day:%b} {day.day}, {day.year}"


def format_status_label(task: Task) -> str:
    if task.completed:
        return "Completed"
    return task.priority.value.capitalize()


def to_view(task: Task, today: date) -> TaskView:
    return TaskView(
        id=task.id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        priority=task.priority,
        completed=task.completed,
        created_at=task.created_at,
        due_label=format_due_label(task.due_date, today),
        status_label=format_status_label(task),
    )


def project(
    tasks: Iterable[Task],
    counts: CategoryCounts,
    *,
    filter_mode: FilterMode | str,
    search_term: str = "",
    sort_key: SortKey | str,
    total_count: int,
    today: date,
) -> TaskListView:
    """Wrap already filtered and sorted tasks into a TaskListView."""
    mode = FilterMode(filter_mode)
    return TaskListView(
        heading="Completed Tasks" if mode is FilterMode.COMPLETED else "Active Tasks",
        filter_mode=mode,
        search_term=search_term,
        sort_key=SortKey(sort_key),
        tasks=[to_view(task, today) for task in tasks],
        categories=build_categories(counts),
        counts=counts,
        total_count=total_count,
    )


def derive_view(
    tasks: Sequence[Task],
    *,
    filter_mode: FilterMode | str = FilterMode.ALL,
    search_term: str = "",
    sort_key: SortKey | str = SortKey.DUE_DATE,
    today: date | None = None,
) -> TaskListView:
    """Run the full pipeline: filter, sort, project; counts over the full set."""
    today = today or date.today()
    selected = filter_tasks(tasks, filter_mode, search_term, today=today)
    ordered = sort_tasks(selected, sort_key)
    return project(
        ordered,
        aggregate(tasks),
        filter_mode=filter_mode,
        search_term=search_term or "",
        sort_key=sort_key,
        total_count=len(tasks),
        today=today,
    )
