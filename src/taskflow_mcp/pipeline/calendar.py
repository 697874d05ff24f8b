"""Calendar helpers: tasks per due day."""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Iterable

from taskflow_mcp.models import Task


def tasks_on_day(tasks: Iterable[Task], day: date) -> list[Task]:
    """Tasks whose due date falls on ``day``; input order preserved."""
    return [task for task in tasks if task.due_day == day]


def due_counts_by_day(tasks: Iterable[Task], year: int, month: int) -> dict[date, int]:
    """Number of tasks due on each day of the given month (days with none are omitted)."""
    counts: Counter[date] = Counter(
        task.due_day
        for task in tasks
        if task.due_day is not None
        and task.due_day.year == year
        and task.due_day.month == month
    )
    return dict(sorted(counts.items()))
