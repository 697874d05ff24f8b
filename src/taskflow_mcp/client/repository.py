"""
Task Repository Adapter.

Per-user task access on top of TaskFlowBackend. Every operation requires the
id of an authenticated principal, validates its input before touching the
store, and only exposes tasks owned by that principal.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from taskflow_mcp.backend import TaskFlowBackend
from taskflow_mcp.exceptions import (
    TaskFlowAuthenticationError,
    TaskFlowNotFoundError,
    TaskFlowValidationError,
)
from taskflow_mcp.models import NewTask, Task, TaskUpdate

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def validate_input(model: type[M], value: M | Mapping[str, Any], operation: str) -> M:
    """Coerce ``value`` into ``model``, raising TaskFlowValidationError on failure."""
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise TaskFlowValidationError.from_pydantic(e, operation=operation) from e


def require_user(user_id: str | None, operation: str) -> str:
    if not user_id or not user_id.strip():
        raise TaskFlowAuthenticationError(
            "An authenticated user is required",
            operation=operation,
        )
    return user_id


class TaskRepository:
    """fetch / create / update / delete for one user's tasks."""

    def __init__(self, backend: TaskFlowBackend) -> None:
        self._backend = backend

    async def fetch_tasks(self, user_id: str) -> list[Task]:
        """All tasks of ``user_id``. Order is not guaranteed."""
        user_id = require_user(user_id, "fetch_tasks")
        return await self._backend.list_tasks(user_id)

    async def get_task(self, user_id: str, task_id: str) -> Task:
        user_id = require_user(user_id, "get_task")
        task = await self._backend.get_task(task_id)
        if task is None or task.user_id != user_id:
            raise TaskFlowNotFoundError(f"Task not found: {task_id}", operation="get_task")
        return task

    async def create_task(self, user_id: str, new_task: NewTask | Mapping[str, Any]) -> Task:
        user_id = require_user(user_id, "create_task")
        data = validate_input(NewTask, new_task, "create_task")
        task = await self._backend.insert_task(user_id, data)
        logger.info("Created task %s for user %s", task.id, user_id)
        return task

    async def update_task(
        self,
        user_id: str,
        task_id: str,
        changes: TaskUpdate | Mapping[str, Any],
    ) -> Task:
        user_id = require_user(user_id, "update_task")
        update = validate_input(TaskUpdate, changes, "update_task")

        current = await self.get_task(user_id, task_id)
        if update.is_empty:
            return current

        task = await self._backend.update_task(task_id, update.to_document_changes())
        if task is None:
            # Deleted between the ownership check and the write
            raise TaskFlowNotFoundError(f"Task not found: {task_id}", operation="update_task")
        logger.info("Updated task %s (%s)", task_id, ", ".join(sorted(update.model_fields_set)))
        return task

    async def delete_task(self, user_id: str, task_id: str) -> bool:
        """True if the task was deleted; False if absent or owned by someone else."""
        user_id = require_user(user_id, "delete_task")
        task = await self._backend.get_task(task_id)
        if task is None or task.user_id != user_id:
            return False
        deleted = await self._backend.delete_task(task_id)
        if deleted:
            logger.info("Deleted task %s for user %s", task_id, user_id)
        return deleted
