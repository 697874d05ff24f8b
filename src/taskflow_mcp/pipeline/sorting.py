"""
Sort stage.

All sorts are non-mutating and stable, so ties keep the incoming order
(newest first, as set by the task board).
"""

from __future__ import annotations

import unicodedata
from datetime import datetime
from typing import Any, Callable, Iterable

from taskflow_mcp.constants import PRIORITY_RANK, UNKNOWN_PRIORITY_RANK, SortKey
from taskflow_mcp.models import Task


def priority_rank(priority: Any) -> int:
    """High < medium < low; unrecognised values rank after low."""
    value = getattr(priority, "value", priority)
    return PRIORITY_RANK.get(value, UNKNOWN_PRIORITY_RANK)


def _due_date_key(task: Task) -> tuple[bool, datetime]:
    # Undated tasks go last; datetime.min only fills the slot.
    return (task.due_date is None, task.due_date or datetime.min)


def _priority_key(task: Task) -> int:
    return priority_rank(task.priority)


def _collation_base(text: str) -> str:
    """Casefolded text with accents stripped, so "école" sorts beside "ecole"."""
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _name_key(task: Task) -> tuple[str, str, str]:
    # Base letters first, then accents, then case.
    folded = unicodedata.normalize("NFKD", task.title.casefold())
    return (_collation_base(task.title), folded, task.title.swapcase())


_SORT_KEYS: dict[SortKey, Callable[[Task], Any]] = {
    SortKey.DUE_DATE: _due_date_key,
    SortKey.PRIORITY: _priority_key,
    SortKey.NAME: _name_key,
}


def sort_tasks(tasks: Iterable[Task], key: SortKey | str = SortKey.DUE_DATE) -> list[Task]:
    """Return a new list of ``tasks`` ordered by ``key``."""
    return sorted(tasks, key=_SORT_KEYS[SortKey(key)])
