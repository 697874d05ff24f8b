"""Per-user preferences: theme and notification flags."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from taskflow_mcp.backend import TaskFlowBackend
from taskflow_mcp.client.repository import require_user, validate_input
from taskflow_mcp.models import PreferencesUpdate, UserPreferences

logger = logging.getLogger(__name__)


class PreferencesService:
    def __init__(self, backend: TaskFlowBackend) -> None:
        self._backend = backend

    async def get_preferences(self, user_id: str) -> UserPreferences:
        """Stored preferences, creating the defaults on first access."""
        user_id = require_user(user_id, "get_preferences")
        preferences = await self._backend.get_preferences(user_id)
        if preferences is None:
            logger.info("Creating default preferences for user %s", user_id)
            preferences = await self._backend.save_preferences(UserPreferences.defaults(user_id))
        return preferences

    async def update_preferences(
        self,
        user_id: str,
        *,
        theme: str | None = None,
        notifications: Mapping[str, Any] | None = None,
    ) -> UserPreferences:
        payload: dict[str, Any] = {}
        if theme is not None:
            payload["theme"] = theme
        if notifications is not None:
            payload["notifications"] = dict(notifications)
        update = validate_input(PreferencesUpdate, payload, "update_preferences")

        current = await self.get_preferences(user_id)
        if update.is_empty:
            return current
        saved = await self._backend.save_preferences(current.apply(update))
        logger.info("Updated preferences for user %s", user_id)
        return saved
