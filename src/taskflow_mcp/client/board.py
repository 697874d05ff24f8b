"""
Task board.

Client-side state for the current principal: the last fetched task set
(keyed by user id) plus the active filter, search term and sort key.
Changing filter/search/sort never re-fetches; ``refresh`` always fetches
the full set. Overlapping refreshes are not coordinated: whichever response
arrives last wins.
"""

from __future__ import annotations

import logging
from datetime import date

from taskflow_mcp.auth import SessionContext
from taskflow_mcp.client.notifications import Notification, Notifier, log_notifier
from taskflow_mcp.client.repository import TaskRepository
from taskflow_mcp.constants import FilterMode, SortKey
from taskflow_mcp.exceptions import TaskFlowError, TaskFlowValidationError
from taskflow_mcp.models import CategoryCounts, Principal, Task, TaskListView
from taskflow_mcp.pipeline import aggregate, derive_view

logger = logging.getLogger(__name__)


class TaskBoard:
    def __init__(
        self,
        repository: TaskRepository,
        session: SessionContext,
        notifier: Notifier = log_notifier,
        *,
        filter_mode: FilterMode = FilterMode.ALL,
        sort_key: SortKey = SortKey.DUE_DATE,
    ) -> None:
        self._repository = repository
        self._session = session
        self._notify = notifier
        self._tasks: list[Task] = []
        self._user_id: str | None = None
        self.filter_mode = filter_mode
        self.search_term = ""
        self.sort_key = sort_key
        self.last_error: TaskFlowError | None = None
        self._unsubscribe = session.subscribe(self._on_session_change)

    # ---- state ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def is_loaded(self) -> bool:
        return self._user_id is not None

    def find(self, task_id: str) -> Task | None:
        return next((task for task in self._tasks if task.id == task_id), None)

    def invalidate(self) -> None:
        self._tasks = []
        self._user_id = None

    def _on_session_change(self, principal: Principal | None, loading: bool) -> None:
        if principal is None or principal.uid != self._user_id:
            self.invalidate()

    def close(self) -> None:
        self._unsubscribe()

    # ---- fetch ----

    async def refresh(self) -> bool:
        """Re-fetch the full task set. On failure keep prior state and notify."""
        try:
            principal = self._session.require_principal()
            tasks = await self._repository.fetch_tasks(principal.uid)
        except TaskFlowError as e:
            self.last_error = e
            self._notify(Notification.error("Error fetching tasks", e.message))
            return False

        current = self._session.principal
        if current is None or current.uid != principal.uid:
            logger.debug("Dropping fetch result for %s after session change", principal.uid)
            return False

        # Newest first; the sort stage is stable so this is the tie order.
        self._tasks = sorted(tasks, key=lambda t: t.created_at, reverse=True)
        self._user_id = principal.uid
        self.last_error = None
        return True

    # ---- view controls ----

    def set_filter(self, mode: FilterMode | str) -> None:
        try:
            self.filter_mode = FilterMode(mode)
        except ValueError as e:
            raise TaskFlowValidationError(f"Unknown filter mode: {mode}") from e

    def set_search(self, term: str | None) -> None:
        self.search_term = term or ""

    def set_sort(self, key: SortKey | str) -> None:
        try:
            self.sort_key = SortKey(key)
        except ValueError as e:
            raise TaskFlowValidationError(f"Unknown sort key: {key}") from e

    # ---- derived ----

    def counts(self) -> CategoryCounts:
        return aggregate(self._tasks)

    def view(self, today: date | None = None) -> TaskListView:
        return derive_view(
            self._tasks,
            filter_mode=self.filter_mode,
            search_term=self.search_term,
            sort_key=self.sort_key,
            today=today,
        )
