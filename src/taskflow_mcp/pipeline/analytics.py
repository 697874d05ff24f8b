"""
Analytics over a user's full task set.

Completion rate, priority breakdown and a seven-day activity window keyed
on task creation date (local time).
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from taskflow_mcp.constants import ANALYTICS_WINDOW_DAYS, PRIORITY_COLORS, TaskPriority
from taskflow_mcp.models import DailyTaskStats, PriorityBreakdown, Task, TaskStatistics


def _created_day(task: Task) -> date:
    return task.created_at.astimezone().date()


def task_statistics(
    tasks: Sequence[Task],
    *,
    today: date | None = None,
    window_days: int = ANALYTICS_WINDOW_DAYS,
) -> TaskStatistics:
    today = today or date.today()
    total = len(tasks)
    completed = sum(1 for task in tasks if task.completed)
    rate = round(completed / total * 100) if total else 0

    by_priority = []
    for priority in (TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW):
        count = sum(1 for task in tasks if task.priority == priority)
        if count:
            by_priority.append(
                PriorityBreakdown(
                    priority=priority, count=count, color=PRIORITY_COLORS[priority.value]
                )
            )

    daily = []
    for offset in range(window_days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_tasks = [task for task in tasks if _created_day(task) == day]
        daily.append(
            DailyTaskStats(
                day=day,
                label=f"{day:%a}",
                date_label=f"{day:%b %d}",
                total=len(day_tasks),
                completed=sum(1 for task in day_tasks if task.completed),
            )
        )

    return TaskStatistics(
        total=total,
        completed=completed,
        pending=total - completed,
        completion_rate=rate,
        by_priority=by_priority,
        daily=daily,
    )
