"""
TaskFlow MCP Tools Package.

Input models and response formatting for the MCP tools. Tools are
organized into logical groups:
    - Session tools (register, login, logout, whoami)
    - Task tools (list, get, create, update, toggle, delete)
    - View tools (categories, calendar, analytics)
    - Preference tools (get, update)
"""

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

__all__ = [
    "ResponseFormat",
    "RegisterInput",
    "LoginInput",
    "WhoAmIInput",
    "TaskCreateInput",
    "TaskGetInput",
    "TaskUpdateInput",
    "TaskToggleInput",
    "TaskDeleteInput",
    "TaskListInput",
    "CategoriesInput",
    "CalendarInput",
    "AnalyticsInput",
    "PreferencesGetInput",
    "PreferencesUpdateInput",
]
