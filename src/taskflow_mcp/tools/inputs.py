"""
Pydantic Input Models for TaskFlow MCP Tools.

This module defines all input validation models used by MCP tools.
Each model includes proper field constraints, descriptions, and examples.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from taskflow_mcp.constants import FilterMode, SortKey, TaskPriority, Theme

TASK_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    MARKDOWN = "markdown"
    JSON = "json"


class BaseMCPInput(BaseModel):
    """Base input model with common configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


# =============================================================================
# Session Input Models
# =============================================================================


class RegisterInput(BaseMCPInput):
    """Input for creating a local account."""

    name: str = Field(
        ...,
        description="Display name (e.g., 'Ada Lovelace')",
        min_length=1,
        max_length=100,
    )
    email: str = Field(..., description="Account email address", max_length=254)
    password: str = Field(..., description="Password (at least 6 characters)", min_length=6)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'json' for machine-readable",
    )


class LoginInput(BaseMCPInput):
    """Input for signing in."""

    email: str = Field(..., description="Account email address", max_length=254)
    password: str = Field(..., description="Account password", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


class WhoAmIInput(BaseMCPInput):
    """Input for showing the signed-in user."""

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


# =============================================================================
# Task Input Models
# =============================================================================


class TaskCreateInput(BaseMCPInput):
    """Input for creating a new task."""

    title: str = Field(
        ...,
        description="Task title (e.g., 'Review quarterly report', 'Buy groceries')",
        min_length=1,
        max_length=500,
    )
    description: Optional[str] = Field(
        default=None,
        description="Task notes",
        max_length=10000,
    )
    due_date: Optional[str] = Field(
        default=None,
        description="Due date in ISO format (e.g., '2025-01-15' or '2025-01-15T17:00:00')",
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        description="Priority level: 'low', 'medium', 'high'",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable, 'json' for machine-readable",
    )

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v: Any) -> Any:
        # Normalize string priorities to lowercase
        return v.lower() if isinstance(v, str) else v

    def to_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"title": self.title, "priority": self.priority}
        if self.description is not None:
            fields["description"] = self.description
        if self.due_date is not None:
            fields["due_date"] = self.due_date
        return fields


class TaskGetInput(BaseMCPInput):
    """Input for getting a task by ID."""

    task_id: str = Field(..., description="Task identifier", pattern=TASK_ID_PATTERN)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


class TaskUpdateInput(BaseMCPInput):
    """Input for updating a task. Only the fields provided are changed."""

    task_id: str = Field(..., description="Task identifier to update", pattern=TASK_ID_PATTERN)
    title: Optional[str] = Field(
        default=None,
        description="New task title",
        min_length=1,
        max_length=500,
    )
    description: Optional[str] = Field(
        default=None,
        description="New task notes (empty string clears them)",
        max_length=10000,
    )
    due_date: Optional[str] = Field(
        default=None,
        description="New due date in ISO format",
    )
    clear_due_date: bool = Field(
        default=False,
        description="Remove the due date",
    )
    priority: Optional[TaskPriority] = Field(
        default=None,
        description="New priority: 'low', 'medium', 'high'",
    )
    completed: Optional[bool] = Field(
        default=None,
        description="Set the completion state",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    def to_changes(self) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        for name in ("title", "description", "priority", "completed"):
            value = getattr(self, name)
            if value is not None:
                changes[name] = value
        if self.clear_due_date:
            changes["due_date"] = None
        elif self.due_date is not None:
            changes["due_date"] = self.due_date
        return changes


class TaskToggleInput(BaseMCPInput):
    """Input for flipping a task between active and completed."""

    task_id: str = Field(..., description="Task identifier to toggle", pattern=TASK_ID_PATTERN)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


class TaskDeleteInput(BaseMCPInput):
    """Input for deleting a task."""

    task_id: str = Field(..., description="Task identifier to delete", pattern=TASK_ID_PATTERN)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


class TaskListInput(BaseMCPInput):
    """Input for listing tasks."""

    filter: Optional[FilterMode] = Field(
        default=None,
        description="Filter: 'all', 'today', 'upcoming', 'completed'. Omit to keep the current one.",
    )
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive text matched against title and description. "
        "Empty string clears the search.",
        max_length=200,
    )
    sort: Optional[SortKey] = Field(
        default=None,
        description="Sort key: 'dueDate', 'priority', 'name'. Omit to keep the current one.",
    )
    limit: int = Field(
        default=50,
        description="Maximum number of tasks to return",
        ge=1,
        le=500,
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


# =============================================================================
# Derived View Input Models
# =============================================================================


class CategoriesInput(BaseMCPInput):
    """Input for the derived category summary."""

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


class CalendarInput(BaseMCPInput):
    """Input for the calendar month view."""

    year: Optional[int] = Field(
        default=None,
        description="Calendar year (defaults to the current year)",
        ge=1970,
        le=9999,
    )
    month: Optional[int] = Field(
        default=None,
        description="Calendar month 1-12 (defaults to the current month)",
        ge=1,
        le=12,
    )
    day: Optional[str] = Field(
        default=None,
        description="Day in YYYY-MM-DD format whose tasks should be listed",
        pattern=r"^\d{4}-\d{2}-\d{2}$",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    @field_validator("day")
    @classmethod
    def validate_day(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            date.fromisoformat(v)
        return v


class AnalyticsInput(BaseMCPInput):
    """Input for task statistics."""

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


# =============================================================================
# Preferences Input Models
# =============================================================================


class PreferencesGetInput(BaseMCPInput):
    """Input for reading the user's preferences."""

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )


class PreferencesUpdateInput(BaseMCPInput):
    """Input for changing preferences. Omitted settings are left unchanged."""

    theme: Optional[Theme] = Field(
        default=None,
        description="Theme: 'light', 'dark' or 'system'",
    )
    email: Optional[bool] = Field(default=None, description="Email notifications")
    push: Optional[bool] = Field(default=None, description="Push notifications")
    task_reminders: Optional[bool] = Field(default=None, description="Task reminders")
    daily_summary: Optional[bool] = Field(default=None, description="Daily summary")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format",
    )

    def notification_changes(self) -> dict[str, bool] | None:
        changes = {
            name: value
            for name in ("email", "push", "task_reminders", "daily_summary")
            if (value := getattr(self, name)) is not None
        }
        return changes or None
