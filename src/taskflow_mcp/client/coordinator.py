"""
Mutation Coordinator.

Each mutation performs exactly one repository write. On success the board
re-fetches the full task set (no optimistic patching); on failure the error
is reported through the notifier and returned in the result, and the board
is left untouched. TaskFlowError never escapes this boundary.

Task states:
    Active ◄──toggle──► Completed
       └──────delete──────┴──► Deleted (terminal)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from taskflow_mcp.auth import SessionContext
from taskflow_mcp.client.board import TaskBoard
from taskflow_mcp.client.notifications import Notification, Notifier, log_notifier
from taskflow_mcp.client.repository import TaskRepository
from taskflow_mcp.exceptions import TaskFlowError, TaskFlowNotFoundError
from taskflow_mcp.models import NewTask, Task, TaskListView, TaskUpdate

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MutationResult:
    """Outcome of a coordinated mutation."""

    operation: str
    ok: bool
    task: Task | None = None
    view: TaskListView | None = None
    error: TaskFlowError | None = None
    refreshed: bool = False


class MutationCoordinator:
    def __init__(
        self,
        repository: TaskRepository,
        board: TaskBoard,
        session: SessionContext,
        notifier: Notifier = log_notifier,
    ) -> None:
        self._repository = repository
        self._board = board
        self._session = session
        self._notify = notifier

    async def _run(
        self,
        operation: str,
        write: Callable[[str], Awaitable[Task | None]],
        *,
        failure_title: str,
        success: Callable[[Task | None], Notification],
    ) -> MutationResult:
        try:
            user_id = self._session.require_principal().uid
            task = await write(user_id)
        except TaskFlowError as e:
            logger.warning("%s failed: %s", operation, e)
            self._notify(Notification.error(failure_title, e.message))
            return MutationResult(operation=operation, ok=False, error=e)

        refreshed = await self._board.refresh()
        self._notify(success(task))
        return MutationResult(
            operation=operation,
            ok=True,
            task=task,
            view=self._board.view(),
            refreshed=refreshed,
        )

    async def add_task(self, new_task: NewTask | Mapping[str, Any]) -> MutationResult:
        async def write(user_id: str) -> Task:
            return await self._repository.create_task(user_id, new_task)

        return await self._run(
            "add_task",
            write,
            failure_title="Error creating task",
            success=lambda _: Notification.info(
                "Task created", "Your task has been created successfully."
            ),
        )

    async def update_task(
        self, task_id: str, changes: TaskUpdate | Mapping[str, Any]
    ) -> MutationResult:
        async def write(user_id: str) -> Task:
            return await self._repository.update_task(user_id, task_id, changes)

        return await self._run(
            "update_task",
            write,
            failure_title="Error updating task",
            success=lambda _: Notification.info("Task updated", "Your changes have been saved."),
        )

    async def toggle_complete(self, task_id: str) -> MutationResult:
        async def write(user_id: str) -> Task:
            current = self._board.find(task_id)
            if current is None:
                current = await self._repository.get_task(user_id, task_id)
            return await self._repository.update_task(
                user_id, task_id, TaskUpdate(completed=not current.completed)
            )

        def success(task: Task | None) -> Notification:
            if task is not None and task.completed:
                return Notification.info("Task completed", "Task has been marked as complete.")
            return Notification.info("Task reopened", "Task has been reopened.")

        return await self._run(
            "toggle_complete",
            write,
            failure_title="Error updating task",
            success=success,
        )

    async def delete_task(self, task_id: str) -> MutationResult:
        async def write(user_id: str) -> None:
            if not await self._repository.delete_task(user_id, task_id):
                raise TaskFlowNotFoundError(f"Task not found: {task_id}", operation="delete_task")
            return None

        return await self._run(
            "delete_task",
            write,
            failure_title="Error deleting task",
            success=lambda _: Notification.info(
                "Task deleted", "The task has been permanently deleted."
            ),
        )
