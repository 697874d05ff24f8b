"""
Pytest Configuration and Fixtures for TaskFlow Tests.

This module provides fixtures, mock factories, and shared utilities for
testing the TaskFlow pipeline, services and client.

Architecture:
    - MockDocumentStore: In-memory store with failure injection and call history
    - Factories: Generate test data (tasks)
    - Fixtures: Provide configured backends, clients and sample data
    - Markers: Custom pytest markers for test categorization
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, AsyncIterator

import pytest

from taskflow_mcp.backend import TaskFlowBackend
from taskflow_mcp.client import Notification, TaskFlowClient, TaskRepository
from taskflow_mcp.constants import TASKS_COLLECTION, TaskPriority
from taskflow_mcp.models import Task
from taskflow_mcp.store import Document, InMemoryDocumentStore


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "pipeline: Filter/sort/aggregate/projection tests")
    config.addinivalue_line("markers", "tasks: Task-related tests")
    config.addinivalue_line("markers", "session: Session and board tests")
    config.addinivalue_line("markers", "preferences: Preference tests")
    config.addinivalue_line("markers", "store: Document store tests")
    config.addinivalue_line("markers", "tools: MCP input and formatting tests")
    config.addinivalue_line("markers", "errors: Error handling tests")


# =============================================================================
# Time Utilities
# =============================================================================

# Fixed "today" for deterministic pipeline tests (a Wednesday).
TODAY = date(2025, 1, 15)


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def at(day: date, hour: int = 9, minute: int = 0) -> datetime:
    """Naive local datetime on ``day``."""
    return datetime(day.year, day.month, day.day, hour, minute)


def days_from(day: date, n: int, hour: int = 9) -> datetime:
    """Naive local datetime ``n`` days after ``day`` (negative for before)."""
    return at(day + timedelta(days=n), hour)


class StepClock:
    """Deterministic clock: each call advances by ``step``."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(minutes=1)):
        self.current = start or datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


# =============================================================================
# ID Generators
# =============================================================================


class IDGenerator:
    """Sequential ID generator for test objects."""

    _counter: int = 0

    @classmethod
    def reset(cls) -> None:
        """Reset counter (call in fixtures)."""
        cls._counter = 0

    @classmethod
    def next_id(cls, prefix: str = "") -> str:
        """Generate next unique ID (24 hex chars, like store ids)."""
        cls._counter += 1
        hex_part = f"{cls._counter:024x}"
        return f"{prefix}{hex_part}" if prefix else hex_part

    @classmethod
    def task_id(cls) -> str:
        return cls.next_id()

    @classmethod
    def user_id(cls) -> str:
        return cls.next_id("user-")


# =============================================================================
# Test Data Factories
# =============================================================================


class TaskFactory:
    """Factory for creating Task test objects."""

    _created: datetime = datetime(2025, 1, 1, tzinfo=timezone.utc)

    @classmethod
    def _next_created(cls) -> datetime:
        cls._created = cls._created + timedelta(minutes=1)
        return cls._created

    @classmethod
    def create(
        cls,
        id: str | None = None,
        user_id: str = "user-1",
        title: str = "Test Task",
        description: str | None = None,
        due_date: datetime | None = None,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        completed: bool = False,
        created_at: datetime | None = None,
    ) -> Task:
        """Create a Task with sensible defaults."""
        return Task(
            id=id or IDGenerator.task_id(),
            user_id=user_id,
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
            completed=completed,
            created_at=created_at or cls._next_created(),
        )

    @classmethod
    def create_due(cls, days_offset: int, today: date = TODAY, **kwargs) -> Task:
        """Create task due ``days_offset`` days from ``today``."""
        return cls.create(due_date=days_from(today, days_offset), **kwargs)

    @classmethod
    def create_completed(cls, **kwargs) -> Task:
        return cls.create(completed=True, **kwargs)

    @classmethod
    def create_batch(cls, count: int, **kwargs) -> list[Task]:
        return [cls.create(title=f"Task {i+1}", **kwargs) for i in range(count)]

    @classmethod
    def create_priority_set(cls, **kwargs) -> list[Task]:
        """One task of each priority, lowest first."""
        return [
            cls.create(title="Low Priority", priority=TaskPriority.LOW, **kwargs),
            cls.create(title="Medium Priority", priority=TaskPriority.MEDIUM, **kwargs),
            cls.create(title="High Priority", priority=TaskPriority.HIGH, **kwargs),
        ]


# =============================================================================
# Mock Store
# =============================================================================


class MockDocumentStore(InMemoryDocumentStore):
    """
    In-memory document store instrumented for tests.

    Records every call and raises the configured exception for any method
    named in ``should_fail``.
    """

    def __init__(self, **kwargs: Any):
        kwargs.setdefault("id_factory", IDGenerator.task_id)
        super().__init__(**kwargs)

        # Track method calls for verification
        self.call_history: list[tuple[str, tuple, dict]] = []

        # Configurable behaviors
        self.should_fail: dict[str, Exception | None] = {}
        # Raised from the persistence step, after a write has been staged
        self.persist_error: Exception | None = None

    def _record_call(self, method: str, args: tuple, kwargs: dict) -> None:
        """Record method call for verification."""
        self.call_history.append((method, args, kwargs))

    def _check_failure(self, method: str) -> None:
        """Check if method should raise an exception."""
        if self.should_fail.get(method):
            raise self.should_fail[method]

    async def add(self, collection: str, data: dict[str, Any]) -> Document:
        self._record_call("add", (collection, data), {})
        self._check_failure("add")
        return await super().add(collection, data)

    async def get(self, collection: str, doc_id: str) -> Document | None:
        self._record_call("get", (collection, doc_id), {})
        self._check_failure("get")
        return await super().get(collection, doc_id)

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> Document:
        self._record_call("set", (collection, doc_id, data), {})
        self._check_failure("set")
        return await super().set(collection, doc_id, data)

    async def update(
        self, collection: str, doc_id: str, changes: dict[str, Any]
    ) -> Document | None:
        self._record_call("update", (collection, doc_id, changes), {})
        self._check_failure("update")
        return await super().update(collection, doc_id, changes)

    async def delete(self, collection: str, doc_id: str) -> bool:
        self._record_call("delete", (collection, doc_id), {})
        self._check_failure("delete")
        return await super().delete(collection, doc_id)

    async def query(self, collection: str, field: str, value: Any) -> list[Document]:
        self._record_call("query", (collection, field, value), {})
        self._check_failure("query")
        return await super().query(collection, field, value)

    async def close(self) -> None:
        self._record_call("close", (), {})
        await super().close()

    async def _persist(self, collections: dict[str, dict[str, dict[str, Any]]]) -> None:
        if self.persist_error is not None:
            raise self.persist_error
        await super()._persist(collections)

    # -------------------------------------------------------------------------
    # Seeding & assertions
    # -------------------------------------------------------------------------

    def seed_raw(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Place a document directly, bypassing validation and call history."""
        self._collection(collection)[doc_id] = dict(data)

    def seed_task(self, task: Task) -> Task:
        data = task.to_document()
        data["createdAt"] = task.created_at.isoformat()
        self.seed_raw(TASKS_COLLECTION, task.id, data)
        return task

    def seed_tasks(self, tasks: list[Task]) -> list[Task]:
        return [self.seed_task(task) for task in tasks]

    def clear_call_history(self) -> None:
        """Clear recorded method calls."""
        self.call_history.clear()

    def get_calls(self, method_name: str) -> list[tuple[tuple, dict]]:
        """Get all calls to a specific method."""
        return [(args, kwargs) for name, args, kwargs in self.call_history if name == method_name]

    def assert_called(self, method_name: str, times: int | None = None) -> None:
        """Assert a method was called (optionally a specific number of times)."""
        calls = self.get_calls(method_name)
        if times is not None:
            assert len(calls) == times, f"Expected {method_name} to be called {times} times, got {len(calls)}"
        else:
            assert len(calls) > 0, f"Expected {method_name} to be called at least once"

    def assert_not_called(self, method_name: str) -> None:
        """Assert a method was not called."""
        calls = self.get_calls(method_name)
        assert len(calls) == 0, f"Expected {method_name} not to be called, but was called {len(calls)} times"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def id_generator():
    """Reset and provide ID generator."""
    IDGenerator.reset()
    return IDGenerator


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def mock_store() -> MockDocumentStore:
    """Create a fresh instrumented store."""
    return MockDocumentStore(clock=StepClock())


@pytest.fixture
async def backend(mock_store: MockDocumentStore) -> AsyncIterator[TaskFlowBackend]:
    async with TaskFlowBackend(mock_store) as backend:
        yield backend


@pytest.fixture
def repository(backend: TaskFlowBackend) -> TaskRepository:
    return TaskRepository(backend)


@pytest.fixture
def notifications() -> list[Notification]:
    """Collects everything passed to the notifier."""
    return []


@pytest.fixture
async def client(
    mock_store: MockDocumentStore, notifications: list[Notification]
) -> AsyncIterator[TaskFlowClient]:
    """Connected client, not signed in."""
    client = TaskFlowClient(
        mock_store,
        notifier=notifications.append,
        password_iterations=1_000,
    )
    await client.connect()
    yield client
    await client.disconnect()


@pytest.fixture
async def auth_client(client: TaskFlowClient) -> TaskFlowClient:
    """Connected client signed in as a freshly registered user."""
    await client.register("Test User", "test@example.com", "password1")
    return client


@pytest.fixture
def task_factory() -> type[TaskFactory]:
    return TaskFactory


@pytest.fixture
def sample_tasks() -> list[Task]:
    """Mixed set around TODAY: dated, undated, completed, every priority."""
    return [
        TaskFactory.create(title="Write report", priority="high", due_date=at(TODAY, 17)),
        TaskFactory.create(title="buy milk", priority="low", description="Semi-skimmed"),
        TaskFactory.create(
            title="Call plumber", priority="medium", due_date=days_from(TODAY, 2)
        ),
        TaskFactory.create(
            title="File taxes", priority="high", due_date=days_from(TODAY, -3), completed=True
        ),
        TaskFactory.create(
            title="Archive email", priority="low", due_date=at(TODAY, 8), completed=True
        ),
    ]
