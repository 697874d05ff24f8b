"""
Task list derivation pipeline.

    fetched tasks ──► filter ──► sort ──► projection (TaskListView)
          │
          └──────────► aggregate (category counts over the full set)
"""

from taskflow_mcp.pipeline.filters import filter_tasks
from taskflow_mcp.pipeline.sorting import sort_tasks, priority_rank
from taskflow_mcp.pipeline.aggregate import aggregate, build_categories
from taskflow_mcp.pipeline.projection import derive_view, project, format_due_label, to_view
from taskflow_mcp.pipeline.calendar import tasks_on_day, due_counts_by_day
from taskflow_mcp.pipeline.analytics import task_statistics

__all__ = [
    "filter_tasks",
    "sort_tasks",
    "priority_rank",
    "aggregate",
    "build_categories",
    "derive_view",
    "project",
    "format_due_label",
    "to_view",
    "tasks_on_day",
    "due_counts_by_day",
    "task_statistics",
]
