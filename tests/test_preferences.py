"""
Preferences Service Tests.

This module tests:
- Lazy creation of default preferences
- Theme updates and validation
- Partial notification updates
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from taskflow_mcp.constants import PREFERENCES_COLLECTION, Theme
from taskflow_mcp.exceptions import TaskFlowAuthenticationError, TaskFlowValidationError

if TYPE_CHECKING:
    from tests.conftest import MockDocumentStore
    from taskflow_mcp.client import TaskFlowClient


pytestmark = [pytest.mark.preferences, pytest.mark.unit]


class TestGetPreferences:
    async def test_defaults_created_lazily(
        self, auth_client: TaskFlowClient, mock_store: MockDocumentStore
    ):
        assert mock_store.count(PREFERENCES_COLLECTION) == 0

        prefs = await auth_client.get_preferences()

        assert prefs.theme is Theme.LIGHT
        assert prefs.notifications.task_reminders is True
        assert prefs.notifications.email is False
        assert mock_store.count(PREFERENCES_COLLECTION) == 1

    async def test_second_read_does_not_write(
        self, auth_client: TaskFlowClient, mock_store: MockDocumentStore
    ):
        await auth_client.get_preferences()
        mock_store.clear_call_history()

        await auth_client.get_preferences()

        mock_store.assert_not_called("set")

    async def test_missing_keys_fall_back_to_defaults(
        self, auth_client: TaskFlowClient, mock_store: MockDocumentStore
    ):
        uid = auth_client.session.principal.uid
        mock_store.seed_raw(PREFERENCES_COLLECTION, uid, {"notifications": {"push": True}})

        prefs = await auth_client.get_preferences()

        assert prefs.theme is Theme.LIGHT
        assert prefs.notifications.push is True
        assert prefs.notifications.task_reminders is True

    async def test_requires_login(self, client: TaskFlowClient):
        with pytest.raises(TaskFlowAuthenticationError):
            await client.get_preferences()


class TestUpdatePreferences:
    async def test_change_theme(self, auth_client: TaskFlowClient):
        prefs = await auth_client.update_preferences(theme="dark")

        assert prefs.theme is Theme.DARK
        assert (await auth_client.get_preferences()).theme is Theme.DARK

    async def test_partial_notification_update_merges(self, auth_client: TaskFlowClient):
        await auth_client.update_preferences(notifications={"email": True})

        prefs = await auth_client.update_preferences(notifications={"daily_summary": True})

        assert prefs.notifications.email is True
        assert prefs.notifications.daily_summary is True
        assert prefs.notifications.push is False
        assert prefs.notifications.task_reminders is True

    async def test_invalid_theme(
        self, auth_client: TaskFlowClient, mock_store: MockDocumentStore
    ):
        mock_store.clear_call_history()

        with pytest.raises(TaskFlowValidationError):
            await auth_client.update_preferences(theme="neon")
        mock_store.assert_not_called("set")

    async def test_unknown_notification_flag(self, auth_client: TaskFlowClient):
        with pytest.raises(TaskFlowValidationError):
            await auth_client.update_preferences(notifications={"sms": True})

    async def test_empty_update_returns_current(self, auth_client: TaskFlowClient):
        before = await auth_client.get_preferences()

        after = await auth_client.update_preferences()

        assert after == before

    async def test_preferences_are_per_user(self, auth_client: TaskFlowClient):
        await auth_client.update_preferences(theme="system")
        await auth_client.logout()
        await auth_client.register("Second", "second@example.com", "secret2")

        prefs = await auth_client.get_preferences()

        assert prefs.theme is Theme.LIGHT
