"""Client-side services: repository, board, mutations, preferences."""

from taskflow_mcp.client.board import TaskBoard
from taskflow_mcp.client.client import TaskFlowClient
from taskflow_mcp.client.coordinator import MutationCoordinator, MutationResult
from taskflow_mcp.client.notifications import (
    Notification,
    NotificationLevel,
    Notifier,
    log_notifier,
)
from taskflow_mcp.client.preferences import PreferencesService
from taskflow_mcp.client.repository import TaskRepository

__all__ = [
    "TaskFlowClient",
    "TaskRepository",
    "TaskBoard",
    "MutationCoordinator",
    "MutationResult",
    "PreferencesService",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "log_notifier",
]
