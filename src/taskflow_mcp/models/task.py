"""
Task models.

Task is the canonical read model built from a store document. NewTask and
TaskUpdate are the write-side models: every mutation is validated through
them before anything reaches the store.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from taskflow_mcp.constants import TaskPriority


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def coerce_due_date(value: Any) -> Any:
    """Accept dates, datetimes and ISO strings for due dates."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        try:
            return to_local_naive(datetime.fromisoformat(value.strip()))
        except ValueError:
            # Let pydantic report the parse error
            return value
    return value


def format_document_datetime(value: datetime | None) -> str | None:
    """Serialize a datetime for storage in a JSON-compatible document."""
    if value is None:
        return None
    return value.isoformat()


class Task(BaseModel):
    """A user-owned to-do item."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    user_id: str
    title: str
    description: str | None = None
    due_date: datetime | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    completed: bool = False
    created_at: datetime

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, v: Any) -> Any:
        return coerce_due_date(v)

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @property
    def due_day(self) -> date | None:
        """Calendar date of the due date (time of day discarded)."""
        return self.due_date.date() if self.due_date else None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> Task:
        """Build a Task from a store document."""
        return cls(
            id=doc_id,
            user_id=data.get("userId", ""),
            title=data.get("title", ""),
            description=data.get("description") or None,
            due_date=data.get("dueDate"),
            priority=data.get("priority") or TaskPriority.MEDIUM,
            completed=bool(data.get("completed", False)),
            created_at=data.get("createdAt"),
        )

    def to_document(self) -> dict[str, Any]:
        """Convert to a store document (id and createdAt are owned by the store)."""
        return {
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "dueDate": format_document_datetime(self.due_date),
            "priority": self.priority.value,
            "completed": self.completed,
        }


class NewTask(BaseModel):
    """Validated input for creating a task."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=10000)
    due_date: datetime | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    completed: bool = False

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, v: Any) -> Any:
        return coerce_due_date(v)

    def to_document(self, user_id: str) -> dict[str, Any]:
        return {
            "userId": user_id,
            "title": self.title,
            "description": self.description or "",
            "dueDate": format_document_datetime(self.due_date),
            "priority": self.priority.value,
            "completed": self.completed,
        }


class TaskUpdate(BaseModel):
    """Validated partial update. Only fields that were explicitly set are written."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=10000)
    due_date: datetime | None = None
    priority: TaskPriority | None = None
    completed: bool | None = None

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, v: Any) -> Any:
        return coerce_due_date(v)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> TaskUpdate:
        for name in ("title", "priority", "completed"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    @property
    def is_empty(self) -> bool:
        return not self.model_fields_set

    def to_document_changes(self) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        fields = self.model_fields_set
        if "title" in fields:
            changes["title"] = self.title
        if "description" in fields:
            changes["description"] = self.description or ""
        if "due_date" in fields:
            changes["dueDate"] = format_document_datetime(self.due_date)
        if "priority" in fields and self.priority is not None:
            changes["priority"] = self.priority.value
        if "completed" in fields:
            changes["completed"] = self.completed
        return changes
