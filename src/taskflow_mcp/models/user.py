"""
User models.

Principal is the authenticated identity of the current session.
UserPreferences holds the per-user theme and notification flags.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from taskflow_mcp.constants import DEFAULT_NOTIFICATIONS, DEFAULT_THEME, Theme


class Principal(BaseModel):
    """Authenticated identity."""

    model_config = ConfigDict(frozen=True)

    uid: str
    display_name: str | None = None
    email: str | None = None

    @property
    def initials(self) -> str:
        if not self.display_name:
            return "U"
        return "".join(part[0] for part in self.display_name.split() if part).upper()


class NotificationSettings(BaseModel):
    """Independent notification flags."""

    email: bool = DEFAULT_NOTIFICATIONS["email"]
    push: bool = DEFAULT_NOTIFICATIONS["push"]
    task_reminders: bool = DEFAULT_NOTIFICATIONS["task_reminders"]
    daily_summary: bool = DEFAULT_NOTIFICATIONS["daily_summary"]


class UserPreferences(BaseModel):
    """Per-user preferences document."""

    user_id: str
    theme: Theme = DEFAULT_THEME
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @classmethod
    def defaults(cls, user_id: str) -> UserPreferences:
        return cls(user_id=user_id)

    @classmethod
    def from_document(cls, user_id: str, data: dict[str, Any]) -> UserPreferences:
        # Missing keys fall back to defaults
        notifications = {**DEFAULT_NOTIFICATIONS, **(data.get("notifications") or {})}
        return cls(
            user_id=user_id,
            theme=data.get("theme") or DEFAULT_THEME,
            notifications=NotificationSettings(**notifications),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "theme": self.theme.value,
            "notifications": self.notifications.model_dump(),
        }

    def apply(self, update: PreferencesUpdate) -> UserPreferences:
        """Return a copy with ``update`` merged in. Unset flags keep their values."""
        notifications = self.notifications
        if update.notifications is not None:
            notifications = notifications.model_copy(
                update=update.notifications.model_dump(exclude_none=True)
            )
        return self.model_copy(
            update={
                "theme": update.theme if update.theme is not None else self.theme,
                "notifications": notifications,
            }
        )


class NotificationUpdate(BaseModel):
    """Partial notification flags."""

    model_config = ConfigDict(extra="forbid")

    email: bool | None = None
    push: bool | None = None
    task_reminders: bool | None = None
    daily_summary: bool | None = None


class PreferencesUpdate(BaseModel):
    """Partial preferences update; omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    theme: Theme | None = None
    notifications: NotificationUpdate | None = None

    @property
    def is_empty(self) -> bool:
        return self.theme is None and (
            self.notifications is None
            or not self.notifications.model_dump(exclude_none=True)
        )
