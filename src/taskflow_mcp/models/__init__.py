"""
TaskFlow Data Models.

This package provides the canonical Pydantic models used throughout the
TaskFlow MCP server.

Models:
    - Task: Canonical task read model
    - NewTask / TaskUpdate: Write-side validation models
    - Category / CategoryCounts: Derived category summaries
    - Principal: Authenticated identity
    - UserPreferences / NotificationSettings: Per-user preferences
    - TaskView / TaskListView: Render-ready projections
    - TaskStatistics: Analytics summary
"""

from taskflow_mcp.models.task import Task, NewTask, TaskUpdate
from taskflow_mcp.models.category import Category, CategoryCounts
from taskflow_mcp.models.user import (
    Principal,
    UserPreferences,
    NotificationSettings,
    NotificationUpdate,
    PreferencesUpdate,
)
from taskflow_mcp.models.view import (
    TaskView,
    TaskListView,
    TaskStatistics,
    DailyTaskStats,
    PriorityBreakdown,
)

__all__ = [
    "Task",
    "NewTask",
    "TaskUpdate",
    "Category",
    "CategoryCounts",
    "Principal",
    "UserPreferences",
    "NotificationSettings",
    "NotificationUpdate",
    "PreferencesUpdate",
    "TaskView",
    "TaskListView",
    "TaskStatistics",
    "DailyTaskStats",
    "PriorityBreakdown",
]
