#!/usr/bin/env python3
"""
TaskFlow MCP Server.

This server exposes a personal task manager over MCP: accounts, per-user
tasks with filtering, search and sorting, derived categories, a calendar
view, analytics and user preferences.

Features:
    - Session management (register, login, logout, whoami)
    - Task management (list, get, create, update, toggle, delete)
    - Derived views (categories, calendar, analytics)
    - Preferences (theme, notification flags)

Environment Variables (all optional):
    TASKFLOW_LOG_LEVEL
    TASKFLOW_STORE_BACKEND       'memory' or 'file'
    TASKFLOW_DATA_PATH
    TASKFLOW_DEFAULT_FILTER
    TASKFLOW_DEFAULT_SORT
    TASKFLOW_PASSWORD_ITERATIONS
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator

from mcp.server.fastmcp import FastMCP, Context

from taskflow_mcp.client import MutationResult, TaskFlowClient
from taskflow_mcp.exceptions import TaskFlowError
from taskflow_mcp.pipeline import to_view
from taskflow_mcp.settings import get_settings
from taskflow_mcp.tools.inputs import (
    ResponseFormat,
    RegisterInput,
    LoginInput,
    WhoAmIInput,
    TaskCreateInput,
    TaskGetInput,
    TaskUpdateInput,
    TaskToggleInput,
    TaskDeleteInput,
    TaskListInput,
    CategoriesInput,
    CalendarInput,
    AnalyticsInput,
    PreferencesGetInput,
    PreferencesUpdateInput,
)
from taskflow_mcp.tools.formatting import (
    format_task_markdown,
    format_task_json,
    format_task_list_markdown,
    format_task_list_json,
    format_categories_markdown,
    format_categories_json,
    format_calendar_markdown,
    format_calendar_json,
    format_statistics_markdown,
    format_statistics_json,
    format_principal_markdown,
    format_principal_json,
    format_preferences_markdown,
    format_preferences_json,
    success_message,
    error_message,
    to_json,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(mcp: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """
    Manage the TaskFlow client lifecycle.

    Initializes the client on startup and closes it on shutdown.
    """
    logger.info("Initializing TaskFlow MCP Server...")

    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)

    try:
        client = TaskFlowClient.from_settings(settings)
        await client.connect()
        logger.info("TaskFlow client connected (%s store)", settings.store_backend)
        yield {"client": client}
    except Exception as e:
        logger.error("Failed to initialize TaskFlow client: %s", e)
        raise
    finally:
        if "client" in locals():
            await client.disconnect()
            logger.info("TaskFlow client disconnected")


# Initialize FastMCP server
mcp = FastMCP(
    "taskflow_mcp",
    lifespan=lifespan,
)


def get_client(ctx: Context) -> TaskFlowClient:
    """Get the TaskFlow client from context."""
    return ctx.request_context.lifespan_context["client"]


# =============================================================================
# Error Handling
# =============================================================================


def handle_error(
    e: Exception,
    operation: str,
    response_format: ResponseFormat = ResponseFormat.MARKDOWN,
) -> str:
    """Handle exceptions and return user-friendly error messages."""
    logger.error("Error in %s: %s", operation, e, exc_info=e)

    if response_format == ResponseFormat.JSON:
        if isinstance(e, TaskFlowError):
            error = e.to_dict()
        else:
            error = {"error": "UnexpectedError", "message": str(e), "operation": operation}
        return to_json({"success": False, **error})

    error_type = type(e).__name__

    if "Authentication" in error_type:
        return error_message(
            f"Authentication required: {e}",
            "Sign in with taskflow_login or create an account with taskflow_register.",
        )
    elif "NotFound" in error_type:
        return error_message(
            f"Resource not found: {e}",
            "Verify the ID is correct. Use taskflow_list_tasks to see your tasks.",
        )
    elif "Validation" in error_type:
        return error_message(str(e))
    elif "StoreUnavailable" in error_type:
        return error_message(
            f"Storage unavailable: {e}",
            "Nothing was changed. Try again later.",
        )
    elif "Configuration" in error_type:
        return error_message(
            f"Configuration error: {e}",
            "Check your TASKFLOW_* environment variables and settings.",
        )
    else:
        return error_message(f"Unexpected error: {e}")


def mutation_response(
    result: MutationResult,
    response_format: ResponseFormat,
    message: str,
) -> str:
    """Render a coordinator result, turning a failed mutation into an error message."""
    if not result.ok:
        return handle_error(result.error, result.operation, response_format)

    task = to_view(result.task, date.today()) if result.task else None
    if response_format == ResponseFormat.MARKDOWN:
        if task is None:
            return success_message(message)
        return f"{success_message(message)}\n\n{format_task_markdown(task)}"
    return to_json(
        {
            "success": True,
            "message": message,
            "task": format_task_json(task) if task else None,
        }
    )


# =============================================================================
# Session Tools
# =============================================================================


@mcp.tool(
    name="taskflow_register",
    annotations={
        "title": "Register Account",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
async def taskflow_register(params: RegisterInput, ctx: Context) -> str:
    """
    Create a local account and sign in as it.

    Args:
        params: Registration parameters including:
            - name (str): Display name
            - email (str): Email address (must be unused)
            - password (str): At least 6 characters

    Returns:
        The new user's profile, or an error message.
    """
    try:
        client = get_client(ctx)
        principal = await client.register(params.name, params.email, params.password)

        if params.response_format == ResponseFormat.MARKDOWN:
            return f"{success_message('Account created.')}\n\n{format_principal_markdown(principal)}"
        else:
            return to_json({"success": True, "user": format_principal_json(principal)})

    except Exception as e:
        return handle_error(e, "register", params.response_format)


@mcp.tool(
    name="taskflow_login",
    annotations={
        "title": "Sign In",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_login(params: LoginInput, ctx: Context) -> str:
    """
    Sign in with email and password.

    All task and preference tools act on behalf of the signed-in user.
    """
    try:
        client = get_client(ctx)
        principal = await client.login(params.email, params.password)

        if params.response_format == ResponseFormat.MARKDOWN:
            return f"{success_message('Signed in.')}\n\n{format_principal_markdown(principal)}"
        else:
            return to_json({"success": True, "user": format_principal_json(principal)})

    except Exception as e:
        return handle_error(e, "login", params.response_format)


@mcp.tool(
    name="taskflow_logout",
    annotations={
        "title": "Sign Out",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_logout(ctx: Context) -> str:
    """Sign out and discard the cached task list."""
    try:
        client = get_client(ctx)
        await client.logout()
        return success_message("Signed out.")

    except Exception as e:
        return handle_error(e, "logout")


@mcp.tool(
    name="taskflow_whoami",
    annotations={
        "title": "Current User",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_whoami(params: WhoAmIInput, ctx: Context) -> str:
    """Show the signed-in user, if any."""
    try:
        client = get_client(ctx)
        principal = client.whoami()

        if params.response_format == ResponseFormat.MARKDOWN:
            if principal is None:
                return "Not signed in."
            return format_principal_markdown(principal)
        else:
            return to_json(
                {
                    "authenticated": principal is not None,
                    "user": format_principal_json(principal) if principal else None,
                }
            )

    except Exception as e:
        return handle_error(e, "whoami", params.response_format)


# =============================================================================
# Task Tools
# =============================================================================


@mcp.tool(
    name="taskflow_list_tasks",
    annotations={
        "title": "List Tasks",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_list_tasks(params: TaskListInput, ctx: Context) -> str:
    """
    List the signed-in user's tasks.

    Re-fetches the full task set, then applies the filter, search and sort.
    Filter, search and sort are remembered between calls; omit them to reuse
    the previous values. Category counts always cover the full set.

    Args:
        params: Listing parameters including:
            - filter (str): 'all', 'today', 'upcoming', 'completed'
            - search (str): Case-insensitive text in title or description
            - sort (str): 'dueDate', 'priority', 'name'
            - limit (int): Maximum tasks to show (default 50)

    Returns:
        Formatted task list with category counts, or an error message.

    Examples:
        - Everything: (no parameters)
        - Due today by priority: filter="today", sort="priority"
        - Search: search="report"
    """
    try:
        client = get_client(ctx)
        view = await client.list_tasks(
            filter_mode=params.filter,
            search=params.search,
            sort_key=params.sort,
        )

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_task_list_markdown(view, params.limit)
        else:
            return to_json(format_task_list_json(view, params.limit))

    except Exception as e:
        return handle_error(e, "list_tasks", params.response_format)


@mcp.tool(
    name="taskflow_get_task",
    annotations={
        "title": "Get Task",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_get_task(params: TaskGetInput, ctx: Context) -> str:
    """Get one of the signed-in user's tasks by ID."""
    try:
        client = get_client(ctx)
        task = to_view(await client.get_task(params.task_id), date.today())

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_task_markdown(task)
        else:
            return to_json(format_task_json(task))

    except Exception as e:
        return handle_error(e, "get_task", params.response_format)


@mcp.tool(
    name="taskflow_create_task",
    annotations={
        "title": "Create Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
async def taskflow_create_task(params: TaskCreateInput, ctx: Context) -> str:
    """
    Create a new task.

    Args:
        params: Task creation parameters including:
            - title (str): Task title (required)
            - description (str): Notes
            - due_date (str): ISO date or datetime
            - priority (str): 'low', 'medium' (default), 'high'

    Returns:
        The created task, or an error message.

    Examples:
        - Simple task: title="Buy groceries"
        - With due date: title="Submit report", due_date="2025-01-20T17:00:00", priority="high"
    """
    try:
        client = get_client(ctx)
        result = await client.create_task(**params.to_fields())
        return mutation_response(result, params.response_format, "Task created.")

    except Exception as e:
        return handle_error(e, "create_task", params.response_format)


@mcp.tool(
    name="taskflow_update_task",
    annotations={
        "title": "Update Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_update_task(params: TaskUpdateInput, ctx: Context) -> str:
    """
    Update fields of an existing task. Only the fields provided are changed.

    Use clear_due_date=true to remove a due date.
    """
    try:
        client = get_client(ctx)
        result = await client.update_task(params.task_id, **params.to_changes())
        return mutation_response(result, params.response_format, "Task updated.")

    except Exception as e:
        return handle_error(e, "update_task", params.response_format)


@mcp.tool(
    name="taskflow_toggle_task",
    annotations={
        "title": "Toggle Task Completion",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
async def taskflow_toggle_task(params: TaskToggleInput, ctx: Context) -> str:
    """Mark an active task completed, or reopen a completed one."""
    try:
        client = get_client(ctx)
        result = await client.toggle_task(params.task_id)
        completed = bool(result.task and result.task.completed)
        message = "Task marked as complete." if completed else "Task reopened."
        return mutation_response(result, params.response_format, message)

    except Exception as e:
        return handle_error(e, "toggle_task", params.response_format)


@mcp.tool(
    name="taskflow_delete_task",
    annotations={
        "title": "Delete Task",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_delete_task(params: TaskDeleteInput, ctx: Context) -> str:
    """Permanently delete a task."""
    try:
        client = get_client(ctx)
        result = await client.delete_task(params.task_id)
        return mutation_response(
            result, params.response_format, f"Task `{params.task_id}` deleted."
        )

    except Exception as e:
        return handle_error(e, "delete_task", params.response_format)


# =============================================================================
# View Tools
# =============================================================================


@mcp.tool(
    name="taskflow_categories",
    annotations={
        "title": "Task Categories",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_categories(params: CategoriesInput, ctx: Context) -> str:
    """
    Show the derived categories: Important, In Progress and Completed.

    Counts are computed over all of the user's tasks.
    """
    try:
        client = get_client(ctx)
        categories = await client.get_categories()

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_categories_markdown(categories)
        else:
            return to_json(format_categories_json(categories))

    except Exception as e:
        return handle_error(e, "categories", params.response_format)


@mcp.tool(
    name="taskflow_calendar",
    annotations={
        "title": "Task Calendar",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_calendar(params: CalendarInput, ctx: Context) -> str:
    """
    Show how many tasks are due on each day of a month.

    Pass day="YYYY-MM-DD" to also list the tasks due on that day. Year and
    month default to the selected day, or to the current month.
    """
    try:
        client = get_client(ctx)
        today = date.today()
        day = date.fromisoformat(params.day) if params.day else None
        anchor = day or today
        year = params.year or anchor.year
        month = params.month or anchor.month

        counts, tasks = await client.get_calendar(year, month, day)
        views = [to_view(task, today) for task in tasks]

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_calendar_markdown(year, month, counts, day, views)
        else:
            return to_json(format_calendar_json(year, month, counts, day, views))

    except Exception as e:
        return handle_error(e, "calendar", params.response_format)


@mcp.tool(
    name="taskflow_analytics",
    annotations={
        "title": "Task Analytics",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_analytics(params: AnalyticsInput, ctx: Context) -> str:
    """Completion rate, priority breakdown and the last seven days of activity."""
    try:
        client = get_client(ctx)
        stats = await client.get_statistics()

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_statistics_markdown(stats)
        else:
            return to_json(format_statistics_json(stats))

    except Exception as e:
        return handle_error(e, "analytics", params.response_format)


# =============================================================================
# Preference Tools
# =============================================================================


@mcp.tool(
    name="taskflow_get_preferences",
    annotations={
        "title": "Get Preferences",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_get_preferences(params: PreferencesGetInput, ctx: Context) -> str:
    """Show theme and notification preferences (defaults are created on first use)."""
    try:
        client = get_client(ctx)
        preferences = await client.get_preferences()

        if params.response_format == ResponseFormat.MARKDOWN:
            return format_preferences_markdown(preferences)
        else:
            return to_json(format_preferences_json(preferences))

    except Exception as e:
        return handle_error(e, "get_preferences", params.response_format)


@mcp.tool(
    name="taskflow_update_preferences",
    annotations={
        "title": "Update Preferences",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def taskflow_update_preferences(params: PreferencesUpdateInput, ctx: Context) -> str:
    """
    Change the theme and/or notification flags.

    Only the settings provided are changed.

    Examples:
        - Dark mode: theme="dark"
        - Daily summary on, push off: daily_summary=true, push=false
    """
    try:
        client = get_client(ctx)
        preferences = await client.update_preferences(
            theme=params.theme.value if params.theme else None,
            notifications=params.notification_changes(),
        )

        if params.response_format == ResponseFormat.MARKDOWN:
            return f"{success_message('Preferences saved.')}\n\n{format_preferences_markdown(preferences)}"
        else:
            return to_json({"success": True, "preferences": format_preferences_json(preferences)})

    except Exception as e:
        return handle_error(e, "update_preferences", params.response_format)


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Main entry point for the TaskFlow MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
