"""
TaskFlow Backend API.

This module provides the TaskFlowBackend class, the single I/O boundary
between the service and the managed document store.

It owns the store's lifecycle, converts between store documents and the
canonical models, and turns any store failure into
TaskFlowStoreUnavailableError so that callers only ever see TaskFlowError
subclasses.
"""

from __future__ import annotations

import inspect
import logging
from types import TracebackType
from typing import Any, Awaitable, TypeVar

from pydantic import ValidationError

from taskflow_mcp.constants import (
    PREFERENCES_COLLECTION,
    TASKS_COLLECTION,
    USERS_COLLECTION,
)
from taskflow_mcp.exceptions import (
    TaskFlowConfigurationError,
    TaskFlowError,
    TaskFlowStoreUnavailableError,
)
from taskflow_mcp.models import NewTask, Task, UserPreferences
from taskflow_mcp.store import Document, DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")
B = TypeVar("B", bound="TaskFlowBackend")


class TaskFlowBackend:
    """
    Document-store backed data access for tasks, preferences and accounts.

    Usage:
        async with TaskFlowBackend(InMemoryDocumentStore()) as backend:
            tasks = await backend.list_tasks(user_id)
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._initialized = False

    # =========================================================================
    # Initialization & Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        """Mark the backend ready. Idempotent."""
        if self._initialized:
            return
        if self._store is None:
            raise TaskFlowConfigurationError("No document store configured")
        self._initialized = True
        logger.info("Backend initialized with %s", type(self._store).__name__)

    async def close(self) -> None:
        """Close the underlying store."""
        if self._initialized:
            await self._store.close()
        self._initialized = False

    async def __aenter__(self: B) -> B:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise TaskFlowConfigurationError(
                "Backend not initialized. Call initialize() or use async context manager."
            )

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Await a store call, converting any failure to StoreUnavailable."""
        if not self._initialized and inspect.iscoroutine(awaitable):
            awaitable.close()
        self._ensure_initialized()
        try:
            return await awaitable
        except TaskFlowError:
            raise
        except Exception as e:
            logger.error("Document store call failed in %s: %s", operation, e)
            raise TaskFlowStoreUnavailableError(
                f"Document store unavailable: {e}",
                operation=operation,
            ) from e

    @staticmethod
    def _to_task(doc: Document) -> Task | None:
        try:
            return Task.from_document(doc.id, doc.data)
        except ValidationError as e:
            logger.warning("Skipping malformed task document %s: %s", doc.id, e)
            return None

    # =========================================================================
    # Task Operations
    # =========================================================================

    async def list_tasks(self, user_id: str) -> list[Task]:
        """All tasks owned by ``user_id``, in store order (unordered)."""
        docs = await self._call(
            "list_tasks", self._store.query(TASKS_COLLECTION, "userId", user_id)
        )
        tasks = [task for task in (self._to_task(doc) for doc in docs) if task is not None]
        logger.debug("Fetched %d tasks for user %s", len(tasks), user_id)
        return tasks

    async def get_task(self, task_id: str) -> Task | None:
        doc = await self._call("get_task", self._store.get(TASKS_COLLECTION, task_id))
        return self._to_task(doc) if doc else None

    async def insert_task(self, user_id: str, new_task: NewTask) -> Task:
        doc = await self._call(
            "create_task",
            self._store.add(TASKS_COLLECTION, new_task.to_document(user_id)),
        )
        return Task.from_document(doc.id, doc.data)

    async def update_task(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        doc = await self._call(
            "update_task", self._store.update(TASKS_COLLECTION, task_id, changes)
        )
        return Task.from_document(doc.id, doc.data) if doc else None

    async def delete_task(self, task_id: str) -> bool:
        return await self._call("delete_task", self._store.delete(TASKS_COLLECTION, task_id))

    # =========================================================================
    # Preferences Operations
    # =========================================================================

    async def get_preferences(self, user_id: str) -> UserPreferences | None:
        doc = await self._call(
            "get_preferences", self._store.get(PREFERENCES_COLLECTION, user_id)
        )
        if doc is None:
            return None
        return UserPreferences.from_document(user_id, doc.data)

    async def save_preferences(self, preferences: UserPreferences) -> UserPreferences:
        doc = await self._call(
            "save_preferences",
            self._store.set(
                PREFERENCES_COLLECTION, preferences.user_id, preferences.to_document()
            ),
        )
        return UserPreferences.from_document(doc.id, doc.data)

    # =========================================================================
    # Account Operations (local identity provider)
    # =========================================================================

    async def find_account(self, email: str) -> Document | None:
        docs = await self._call(
            "find_account", self._store.query(USERS_COLLECTION, "email", email)
        )
        return docs[0] if docs else None

    async def get_account(self, uid: str) -> Document | None:
        return await self._call("get_account", self._store.get(USERS_COLLECTION, uid))

    async def add_account(self, data: dict[str, Any]) -> Document:
        return await self._call("add_account", self._store.add(USERS_COLLECTION, data))
