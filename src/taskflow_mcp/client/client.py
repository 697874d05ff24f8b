"""
TaskFlow Client.

High-level facade over the backend, session, board, coordinator and
preferences service. This is what the MCP tools talk to.
"""

from __future__ import annotations

import logging
from datetime import date
from types import TracebackType
from typing import Any, TypeVar

from taskflow_mcp.auth import IdentityProvider, LocalIdentityProvider, SessionContext
from taskflow_mcp.backend import TaskFlowBackend
from taskflow_mcp.client.board import TaskBoard
from taskflow_mcp.client.coordinator import MutationCoordinator, MutationResult
from taskflow_mcp.client.notifications import Notifier, log_notifier
from taskflow_mcp.client.preferences import PreferencesService
from taskflow_mcp.client.repository import TaskRepository
from taskflow_mcp.constants import FilterMode, SortKey
from taskflow_mcp.exceptions import TaskFlowError
from taskflow_mcp.models import (
    Category,
    Principal,
    Task,
    TaskListView,
    TaskStatistics,
    UserPreferences,
)
from taskflow_mcp.pipeline import (
    build_categories,
    due_counts_by_day,
    task_statistics,
    tasks_on_day,
)
from taskflow_mcp.settings import Settings, get_settings
from taskflow_mcp.store import DocumentStore, InMemoryDocumentStore, JsonFileDocumentStore

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="TaskFlowClient")


class TaskFlowClient:
    """
    Usage:
        async with TaskFlowClient.from_settings() as client:
            await client.login("ada@example.com", "secret1")
            view = await client.list_tasks(filter_mode="today")
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        identity: IdentityProvider | None = None,
        notifier: Notifier = log_notifier,
        filter_mode: FilterMode = FilterMode.ALL,
        sort_key: SortKey = SortKey.DUE_DATE,
        password_iterations: int = 200_000,
    ) -> None:
        self._backend = TaskFlowBackend(store)
        self._identity = identity or LocalIdentityProvider(
            self._backend, iterations=password_iterations
        )
        self.session = SessionContext(self._identity)
        self.repository = TaskRepository(self._backend)
        self.board = TaskBoard(
            self.repository,
            self.session,
            notifier,
            filter_mode=filter_mode,
            sort_key=sort_key,
        )
        self.coordinator = MutationCoordinator(
            self.repository, self.board, self.session, notifier
        )
        self.preferences = PreferencesService(self._backend)

    @classmethod
    def from_settings(cls: type[C], settings: Settings | None = None, **kwargs: Any) -> C:
        settings = settings or get_settings()
        store: DocumentStore
        if settings.store_backend == "file":
            store = JsonFileDocumentStore(settings.data_path)
        else:
            store = InMemoryDocumentStore()
        return cls(
            store,
            filter_mode=settings.default_filter,
            sort_key=settings.default_sort,
            password_iterations=settings.password_iterations,
            **kwargs,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def connect(self) -> None:
        await self._backend.initialize()
        if self.session.loading:
            self.session.start()

    async def disconnect(self) -> None:
        self.board.close()
        await self._backend.close()

    async def __aenter__(self: C) -> C:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    @property
    def backend(self) -> TaskFlowBackend:
        return self._backend

    # =========================================================================
    # Session
    # =========================================================================

    async def register(self, name: str, email: str, password: str) -> Principal:
        return await self.session.register(name, email, password)

    async def login(self, email: str, password: str) -> Principal:
        return await self.session.login(email, password)

    async def logout(self) -> None:
        await self.session.logout()

    def whoami(self) -> Principal | None:
        return self.session.principal

    # =========================================================================
    # Tasks
    # =========================================================================

    async def _load(self) -> list[Task]:
        """Refresh the board, raising the fetch error instead of only notifying."""
        if not await self.board.refresh():
            raise self.board.last_error or TaskFlowError("Task list could not be loaded")
        return self.board.tasks

    async def list_tasks(
        self,
        *,
        filter_mode: FilterMode | str | None = None,
        search: str | None = None,
        sort_key: SortKey | str | None = None,
        today: date | None = None,
    ) -> TaskListView:
        if filter_mode is not None:
            self.board.set_filter(filter_mode)
        if search is not None:
            self.board.set_search(search)
        if sort_key is not None:
            self.board.set_sort(sort_key)
        await self._load()
        return self.board.view(today)

    async def get_task(self, task_id: str) -> Task:
        user_id = self.session.require_principal().uid
        return await self.repository.get_task(user_id, task_id)

    async def create_task(self, **fields: Any) -> MutationResult:
        return await self.coordinator.add_task(fields)

    async def update_task(self, task_id: str, **changes: Any) -> MutationResult:
        return await self.coordinator.update_task(task_id, changes)

    async def toggle_task(self, task_id: str) -> MutationResult:
        return await self.coordinator.toggle_complete(task_id)

    async def delete_task(self, task_id: str) -> MutationResult:
        return await self.coordinator.delete_task(task_id)

    # =========================================================================
    # Derived views
    # =========================================================================

    async def get_categories(self) -> list[Category]:
        await self._load()
        return build_categories(self.board.counts())

    async def get_calendar(
        self, year: int, month: int, day: date | None = None
    ) -> tuple[dict[date, int], list[Task]]:
        """Due counts for the month, plus the tasks due on ``day`` if given."""
        tasks = await self._load()
        selected = tasks_on_day(tasks, day) if day is not None else []
        return due_counts_by_day(tasks, year, month), selected

    async def get_statistics(self, today: date | None = None) -> TaskStatistics:
        tasks = await self._load()
        return task_statistics(tasks, today=today)

    # =========================================================================
    # Preferences
    # =========================================================================

    async def get_preferences(self) -> UserPreferences:
        user_id = self.session.require_principal().uid
        return await self.preferences.get_preferences(user_id)

    async def update_preferences(
        self,
        *,
        theme: str | None = None,
        notifications: dict[str, bool] | None = None,
    ) -> UserPreferences:
        user_id = self.session.require_principal().uid
        return await self.preferences.update_preferences(
            user_id, theme=theme, notifications=notifications
        )
