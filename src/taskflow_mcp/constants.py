"""
TaskFlow Constants.

Enumerations and fixed tables shared by the models, the derivation pipeline
and the tool layer.
"""

from __future__ import annotations

from enum import Enum


class TaskPriority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FilterMode(str, Enum):
    """Predicate categories applied to the fetched task set."""

    ALL = "all"
    TODAY = "today"
    UPCOMING = "upcoming"
    COMPLETED = "completed"


class SortKey(str, Enum):
    """Comparator keys for the sort stage."""

    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    NAME = "name"


class Theme(str, Enum):
    """UI theme selection stored in user preferences."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class SessionStatus(str, Enum):
    """Lifecycle of the authentication session."""

    INITIALIZING = "initializing"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


# Lower rank sorts first. Anything missing from this table sorts after "low".
PRIORITY_RANK: dict[str, int] = {
    TaskPriority.HIGH.value: 0,
    TaskPriority.MEDIUM.value: 1,
    TaskPriority.LOW.value: 2,
}
UNKNOWN_PRIORITY_RANK = len(PRIORITY_RANK)

# Store collections
TASKS_COLLECTION = "tasks"
PREFERENCES_COLLECTION = "userPreferences"
USERS_COLLECTION = "users"

DEFAULT_THEME = Theme.LIGHT
DEFAULT_NOTIFICATIONS: dict[str, bool] = {
    "email": False,
    "push": False,
    "task_reminders": True,
    "daily_summary": False,
}

# Derived category definitions: (id, name, color, description)
CATEGORY_IMPORTANT = ("important", "Important", "#3B82F6", "High priority tasks that need attention")
CATEGORY_IN_PROGRESS = ("in-progress", "In Progress", "#8B5CF6", "Tasks you're currently working on")
CATEGORY_COMPLETED = ("completed", "Completed", "#10B981", "Tasks you've successfully completed")

# Chart colors used by the analytics breakdown
PRIORITY_COLORS: dict[str, str] = {
    TaskPriority.HIGH.value: "#EF4444",
    TaskPriority.MEDIUM.value: "#F59E0B",
    TaskPriority.LOW.value: "#10B981",
}

ANALYTICS_WINDOW_DAYS = 7
