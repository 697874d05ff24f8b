"""
Derived-category aggregator.

Counts are computed over the full, unfiltered task set. The three
categories are independent views and overlap (a high-priority incomplete
task counts as both important and in progress).
"""

from __future__ import annotations

from typing import Iterable

from taskflow_mcp.constants import (
    CATEGORY_COMPLETED,
    CATEGORY_IMPORTANT,
    CATEGORY_IN_PROGRESS,
    TaskPriority,
)
from taskflow_mcp.models import Category, CategoryCounts, Task


def aggregate(tasks: Iterable[Task]) -> CategoryCounts:
    important = in_progress = completed = 0
    for task in tasks:
        if task.priority == TaskPriority.HIGH:
            important += 1
        if task.completed:
            completed += 1
        else:
            in_progress += 1
    return CategoryCounts(important=important, in_progress=in_progress, completed=completed)


def build_categories(counts: CategoryCounts) -> list[Category]:
    """Attach the fixed label, color and description to each count."""
    definitions = (
        (CATEGORY_IMPORTANT, counts.important),
        (CATEGORY_IN_PROGRESS, counts.in_progress),
        (CATEGORY_COMPLETED, counts.completed),
    )
    return [
        Category(id=cat_id, name=name, color=color, description=description, count=count)
        for (cat_id, name, color, description), count in definitions
    ]
