"""
Response formatting for TaskFlow MCP tools.

Every tool can answer in markdown (for people) or JSON (for programs).
The ``format_*_markdown`` helpers return strings; the ``format_*_json``
helpers return JSON-compatible dicts that the server serializes.
"""

from __future__ import annotations

import json
from calendar import month_name
from datetime import date
from typing import Any, Sequence

from taskflow_mcp.models import (
    Category,
    Principal,
    TaskListView,
    TaskStatistics,
    TaskView,
    UserPreferences,
)

PRIORITY_ICONS = {"high": "🔴", "medium": "🟡", "low": "🟢"}


def success_message(message: str) -> str:
    return f"✅ {message}"


def error_message(message: str, suggestion: str | None = None) -> str:
    lines = [f"❌ **Error**: {message}"]
    if suggestion:
        lines.append("")
        lines.append(f"💡 {suggestion}")
    return "\n".join(lines)


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


# =============================================================================
# Tasks
# =============================================================================


def format_task_markdown(task: TaskView) -> str:
    check = "x" if task.completed else " "
    icon = PRIORITY_ICONS.get(task.priority.value, "")
    lines = [
        f"## [{check}] {task.title}",
        "",
        f"- **ID**: `{task.id}`",
        f"- **Status**: {task.status_label}",
        f"- **Priority**: {icon} {task.priority.value}",
        f"- **Due**: {task.due_label}",
    ]
    if task.description:
        lines.append("")
        lines.append(task.description)
    return "\n".join(lines)


def format_task_json(task: TaskView) -> dict[str, Any]:
    return task.model_dump(mode="json")


def format_task_list_markdown(view: TaskListView, limit: int | None = None) -> str:
    tasks = view.tasks[:limit] if limit else view.tasks
    header = f"# {view.heading} ({view.shown_count} of {view.total_count})"
    details = [f"filter: `{view.filter_mode.value}`", f"sort: `{view.sort_key.value}`"]
    if view.search_term:
        details.append(f"search: \"{view.search_term}\"")

    lines = [header, "", " · ".join(details), ""]
    if not tasks:
        lines.append("No tasks found.")
    for task in tasks:
        check = "x" if task.completed else " "
        icon = PRIORITY_ICONS.get(task.priority.value, "")
        lines.append(f"- [{check}] {icon} **{task.title}** ({task.due_label}) `{task.id}`")
    if len(tasks) < len(view.tasks):
        lines.append("")
        lines.append(f"_{len(view.tasks) - len(tasks)} more not shown_")

    lines.append("")
    lines.append(format_categories_markdown(view.categories, heading="## Categories"))
    return "\n".join(lines)


def format_task_list_json(view: TaskListView, limit: int | None = None) -> dict[str, Any]:
    tasks = view.tasks[:limit] if limit else view.tasks
    return {
        "heading": view.heading,
        "filter": view.filter_mode.value,
        "search": view.search_term,
        "sort": view.sort_key.value,
        "total_count": view.total_count,
        "shown_count": view.shown_count,
        "tasks": [format_task_json(task) for task in tasks],
        "categories": format_categories_json(view.categories),
    }


# =============================================================================
# Categories, calendar, analytics
# =============================================================================


def format_categories_markdown(
    categories: Sequence[Category], heading: str = "# Categories"
) -> str:
    lines = [heading, ""]
    for category in categories:
        lines.append(f"- **{category.name}**: {category.count} ({category.description})")
    return "\n".join(lines)


def format_categories_json(categories: Sequence[Category]) -> list[dict[str, Any]]:
    return [category.model_dump(mode="json") for category in categories]


def format_calendar_markdown(
    year: int,
    month: int,
    counts: dict[date, int],
    day: date | None = None,
    tasks: Sequence[TaskView] = (),
) -> str:
    lines = [f"# {month_name[month]} {year}", ""]
    if not counts:
        lines.append("No tasks due this month.")
    for due_day in sorted(counts):
        n = counts[due_day]
        lines.append(f"- {due_day:%a %b %d}: {n} task{'s' if n != 1 else ''}")
    if day is not None:
        lines.append("")
        lines.append(f"## {day:%A, %B} {day.day}")
        lines.append("")
        if not tasks:
            lines.append("No tasks due on this day.")
        for task in tasks:
            check = "x" if task.completed else " "
            lines.append(f"- [{check}] **{task.title}** ({task.status_label}) `{task.id}`")
    return "\n".join(lines)


def format_calendar_json(
    year: int,
    month: int,
    counts: dict[date, int],
    day: date | None = None,
    tasks: Sequence[TaskView] = (),
) -> dict[str, Any]:
    return {
        "year": year,
        "month": month,
        "due_counts": {d.isoformat(): n for d, n in sorted(counts.items())},
        "day": day.isoformat() if day else None,
        "tasks": [format_task_json(task) for task in tasks],
    }


def format_statistics_markdown(stats: TaskStatistics) -> str:
    lines = [
        "# Task Analytics",
        "",
        f"- **Total**: {stats.total}",
        f"- **Completed**: {stats.completed}",
        f"- **Pending**: {stats.pending}",
        f"- **Completion Rate**: {stats.completion_rate}%",
        "",
        "## By Priority",
        "",
    ]
    if not stats.by_priority:
        lines.append("No tasks yet.")
    for item in stats.by_priority:
        lines.append(f"- {PRIORITY_ICONS.get(item.priority.value, '')} {item.priority.value}: {item.count}")
    lines += ["", "## Last 7 Days", "", "| Day | Date | Created | Completed |", "|---|---|---|---|"]
    for daily in stats.daily:
        lines.append(f"| {daily.label} | {daily.date_label} | {daily.total} | {daily.completed} |")
    return "\n".join(lines)


def format_statistics_json(stats: TaskStatistics) -> dict[str, Any]:
    return stats.model_dump(mode="json")


# =============================================================================
# Users & preferences
# =============================================================================


def format_principal_markdown(principal: Principal) -> str:
    lines = [
        f"# {principal.display_name or 'User'} ({principal.initials})",
        "",
        f"- **User ID**: `{principal.uid}`",
    ]
    if principal.email:
        lines.append(f"- **Email**: {principal.email}")
    return "\n".join(lines)


def format_principal_json(principal: Principal) -> dict[str, Any]:
    return principal.model_dump(mode="json")


def format_preferences_markdown(preferences: UserPreferences) -> str:
    def flag(value: bool) -> str:
        return "on" if value else "off"

    n = preferences.notifications
    return "\n".join(
        [
            "# Preferences",
            "",
            f"- **Theme**: {preferences.theme.value}",
            f"- **Email notifications**: {flag(n.email)}",
            f"- **Push notifications**: {flag(n.push)}",
            f"- **Task reminders**: {flag(n.task_reminders)}",
            f"- **Daily summary**: {flag(n.daily_summary)}",
        ]
    )


def format_preferences_json(preferences: UserPreferences) -> dict[str, Any]:
    return preferences.model_dump(mode="json")
