"""
Filter stage.

The mode predicate is applied first, then an optional case-insensitive
substring search over title and description. Input order is preserved.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable

from taskflow_mcp.constants import FilterMode
from taskflow_mcp.models import Task

TaskPredicate = Callable[[Task], bool]


def _is_due_today(today: date) -> TaskPredicate:
    def predicate(task: Task) -> bool:
        return task.due_day is not None and task.due_day == today

    return predicate


def _is_upcoming(today: date) -> TaskPredicate:
    def predicate(task: Task) -> bool:
        return task.due_day is not None and task.due_day >= today and not task.completed

    return predicate


def _is_completed(task: Task) -> bool:
    return task.completed


def mode_predicate(mode: FilterMode | str, today: date) -> TaskPredicate | None:
    """Return the predicate for a filter mode, or None for ``all``."""
    mode = FilterMode(mode)
    if mode is FilterMode.TODAY:
        return _is_due_today(today)
    if mode is FilterMode.UPCOMING:
        return _is_upcoming(today)
    if mode is FilterMode.COMPLETED:
        return _is_completed
    return None


def normalize_search(search_term: str | None) -> str:
    """Trimmed, casefolded search term; empty string means no search."""
    if not search_term:
        return ""
    return search_term.strip().casefold()


def matches_search(task: Task, term: str) -> bool:
    if term in task.title.casefold():
        return True
    return bool(task.description) and term in task.description.casefold()


def filter_tasks(
    tasks: Iterable[Task],
    mode: FilterMode | str = FilterMode.ALL,
    search_term: str | None = None,
    *,
    today: date | None = None,
) -> list[Task]:
    """Return the subsequence of ``tasks`` selected by ``mode`` and ``search_term``."""
    predicate = mode_predicate(mode, today or date.today())
    term = normalize_search(search_term)

    result = [task for task in tasks if predicate is None or predicate(task)]
    if term:
        result = [task for task in result if matches_search(task, term)]
    return result
