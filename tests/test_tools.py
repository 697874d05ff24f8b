"""
MCP Tool Layer Tests.

This module tests:
- Input model validation
- Markdown / JSON formatting
- handle_error mapping
- Tool functions end to end against a real client
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from taskflow_mcp import server
from taskflow_mcp.constants import FilterMode, SortKey
from taskflow_mcp.exceptions import (
    TaskFlowAuthenticationError,
    TaskFlowNotFoundError,
    TaskFlowStoreUnavailableError,
    TaskFlowValidationError,
)
from taskflow_mcp.tools.formatting import error_message, success_message
from taskflow_mcp.tools.inputs import (
    CalendarInput,
    LoginInput,
    PreferencesUpdateInput,
    RegisterInput,
    ResponseFormat,
    TaskCreateInput,
    TaskDeleteInput,
    TaskGetInput,
    TaskListInput,
    TaskToggleInput,
    TaskUpdateInput,
    WhoAmIInput,
)

if TYPE_CHECKING:
    from taskflow_mcp.client import TaskFlowClient


pytestmark = [pytest.mark.tools, pytest.mark.unit]


def make_ctx(client: TaskFlowClient) -> SimpleNamespace:
    """Minimal stand-in for the MCP request context."""
    return SimpleNamespace(
        request_context=SimpleNamespace(lifespan_context={"client": client})
    )


# =============================================================================
# Input Models
# =============================================================================


class TestInputs:
    def test_create_strips_and_normalizes(self):
        params = TaskCreateInput(title="  Buy milk  ", priority="HIGH")

        assert params.title == "Buy milk"
        assert params.to_fields() == {"title": "Buy milk", "priority": params.priority}
        assert params.priority.value == "high"

    def test_create_rejects_extra_fields(self):
        with pytest.raises(ValidationError):
            TaskCreateInput(title="X", project_id="inbox1")

    def test_create_rejects_empty_title(self):
        with pytest.raises(ValidationError):
            TaskCreateInput(title="   ")

    def test_update_changes_only_provided_fields(self):
        params = TaskUpdateInput(task_id="abc123", completed=True, description="")

        assert params.to_changes() == {"description": "", "completed": True}

    def test_update_clear_due_date_wins(self):
        params = TaskUpdateInput(task_id="abc123", due_date="2025-01-20", clear_due_date=True)

        assert params.to_changes() == {"due_date": None}

    def test_list_enums(self):
        params = TaskListInput(filter="upcoming", sort="name")

        assert params.filter is FilterMode.UPCOMING
        assert params.sort is SortKey.NAME

    def test_list_rejects_unknown_filter(self):
        with pytest.raises(ValidationError):
            TaskListInput(filter="someday")

    @pytest.mark.parametrize("task_id", ["", "has space", "../etc"])
    def test_task_id_pattern(self, task_id: str):
        with pytest.raises(ValidationError):
            TaskGetInput(task_id=task_id)

    def test_calendar_day_must_be_real_date(self):
        with pytest.raises(ValidationError):
            CalendarInput(day="2025-02-30")

    def test_preferences_notification_changes(self):
        params = PreferencesUpdateInput(push=False, daily_summary=True)

        assert params.notification_changes() == {"push": False, "daily_summary": True}
        assert PreferencesUpdateInput().notification_changes() is None

    def test_register_password_length(self):
        with pytest.raises(ValidationError):
            RegisterInput(name="Ada", email="ada@example.com", password="12345")


# =============================================================================
# Error Handling
# =============================================================================


class TestHandleError:
    @pytest.mark.parametrize(
        "error,fragment",
        [
            (TaskFlowAuthenticationError("Login required"), "Authentication required"),
            (TaskFlowNotFoundError("Task not found: x"), "Resource not found"),
            (TaskFlowValidationError("Invalid input: title"), "Invalid input"),
            (TaskFlowStoreUnavailableError("down"), "Storage unavailable"),
            (RuntimeError("kaboom"), "Unexpected error"),
        ],
    )
    def test_markdown_messages(self, error: Exception, fragment: str):
        message = server.handle_error(error, "op")

        assert fragment in message
        assert message.startswith("❌")

    def test_json_error_body(self):
        error = TaskFlowValidationError(
            "Invalid input: title",
            operation="create_task",
            details={"errors": [{"field": "title", "message": "too short"}]},
        )

        body = json.loads(server.handle_error(error, "create_task", ResponseFormat.JSON))

        assert body["success"] is False
        assert body["error"] == "TaskFlowValidationError"
        assert body["details"]["errors"][0]["field"] == "title"

    def test_json_unexpected_error(self):
        body = json.loads(server.handle_error(ValueError("bad"), "op", ResponseFormat.JSON))

        assert body["error"] == "UnexpectedError"
        assert body["operation"] == "op"

    def test_message_helpers(self):
        assert success_message("Done") == "✅ Done"
        assert error_message("Oops", "Try again") == "❌ **Error**: Oops\n\n💡 Try again"


# =============================================================================
# Tool Functions
# =============================================================================


class TestTools:
    async def test_session_tools(self, client: TaskFlowClient):
        ctx = make_ctx(client)

        anonymous = json.loads(
            await server.taskflow_whoami(WhoAmIInput(response_format="json"), ctx)
        )
        registered = await server.taskflow_register(
            RegisterInput(name="Ada Lovelace", email="ada@example.com", password="secret1"), ctx
        )
        logged_out = await server.taskflow_logout(ctx)
        logged_in = json.loads(
            await server.taskflow_login(
                LoginInput(email="ada@example.com", password="secret1", response_format="json"),
                ctx,
            )
        )

        assert anonymous == {"authenticated": False, "user": None}
        assert "Account created" in registered
        assert "AL" in registered
        assert "Signed out" in logged_out
        assert logged_in["success"] is True
        assert logged_in["user"]["email"] == "ada@example.com"

    async def test_bad_login_message(self, client: TaskFlowClient):
        message = await server.taskflow_login(
            LoginInput(email="ada@example.com", password="nope"), make_ctx(client)
        )

        assert "Authentication required" in message

    async def test_task_lifecycle(self, auth_client: TaskFlowClient):
        ctx = make_ctx(auth_client)

        created = json.loads(
            await server.taskflow_create_task(
                TaskCreateInput(title="Write tests", priority="high", response_format="json"), ctx
            )
        )
        task_id = created["task"]["id"]

        listing = json.loads(
            await server.taskflow_list_tasks(TaskListInput(response_format="json"), ctx)
        )
        toggled = await server.taskflow_toggle_task(TaskToggleInput(task_id=task_id), ctx)
        fetched = json.loads(
            await server.taskflow_get_task(TaskGetInput(task_id=task_id, response_format="json"), ctx)
        )
        updated = await server.taskflow_update_task(
            TaskUpdateInput(task_id=task_id, title="Write more tests"), ctx
        )
        deleted = await server.taskflow_delete_task(TaskDeleteInput(task_id=task_id), ctx)
        missing = await server.taskflow_get_task(TaskGetInput(task_id=task_id), ctx)

        assert created["success"] is True
        assert created["task"]["priority"] == "high"
        assert listing["total_count"] == 1
        assert listing["categories"][0]["count"] == 1
        assert "marked as complete" in toggled
        assert fetched["completed"] is True
        assert fetched["status_label"] == "Completed"
        assert "Write more tests" in updated
        assert "deleted" in deleted
        assert "Resource not found" in missing

    async def test_create_validation_failure_is_reported(self, auth_client: TaskFlowClient):
        message = await server.taskflow_create_task(
            TaskCreateInput(title="Due when?", due_date="not a date"), make_ctx(auth_client)
        )

        assert "Invalid input" in message

    async def test_delete_missing(self, auth_client: TaskFlowClient):
        message = await server.taskflow_delete_task(
            TaskDeleteInput(task_id="doesnotexist"), make_ctx(auth_client)
        )

        assert "Resource not found" in message

    async def test_delete_json(self, auth_client: TaskFlowClient):
        ctx = make_ctx(auth_client)
        created = json.loads(
            await server.taskflow_create_task(
                TaskCreateInput(title="Short lived", response_format="json"), ctx
            )
        )
        task_id = created["task"]["id"]

        deleted = json.loads(
            await server.taskflow_delete_task(
                TaskDeleteInput(task_id=task_id, response_format="json"), ctx
            )
        )
        missing = json.loads(
            await server.taskflow_delete_task(
                TaskDeleteInput(task_id=task_id, response_format="json"), ctx
            )
        )

        assert deleted["success"] is True
        assert deleted["task"] is None
        assert missing["success"] is False
        assert missing["error"] == "TaskFlowNotFoundError"

    async def test_list_requires_login(self, client: TaskFlowClient):
        message = await server.taskflow_list_tasks(TaskListInput(), make_ctx(client))

        assert "Authentication required" in message

    async def test_list_markdown(self, auth_client: TaskFlowClient):
        ctx = make_ctx(auth_client)
        await server.taskflow_create_task(TaskCreateInput(title="Alpha"), ctx)
        await server.taskflow_create_task(TaskCreateInput(title="Beta"), ctx)

        markdown = await server.taskflow_list_tasks(
            TaskListInput(search="alp", sort="name", limit=10), ctx
        )

        assert markdown.startswith("# Active Tasks (1 of 2)")
        assert "**Alpha**" in markdown
        assert "**Beta**" not in markdown
        assert "## Categories" in markdown

    async def test_preferences_tools(self, auth_client: TaskFlowClient):
        ctx = make_ctx(auth_client)

        updated = json.loads(
            await server.taskflow_update_preferences(
                PreferencesUpdateInput(theme="dark", email=True, response_format="json"), ctx
            )
        )

        assert updated["preferences"]["theme"] == "dark"
        assert updated["preferences"]["notifications"]["email"] is True
        assert updated["preferences"]["notifications"]["task_reminders"] is True

    async def test_calendar_json(self, auth_client: TaskFlowClient):
        ctx = make_ctx(auth_client)
        await server.taskflow_create_task(
            TaskCreateInput(title="Dentist", due_date="2025-03-04T10:00:00"), ctx
        )

        body = json.loads(
            await server.taskflow_calendar(
                CalendarInput(day="2025-03-04", response_format="json"), ctx
            )
        )

        assert body["year"] == 2025
        assert body["month"] == 3
        assert body["due_counts"] == {"2025-03-04": 1}
        assert [t["title"] for t in body["tasks"]] == ["Dentist"]
