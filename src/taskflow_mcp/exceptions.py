"""
TaskFlow Exception Hierarchy.

All errors raised by the TaskFlow service derive from TaskFlowError so that
callers (the mutation coordinator, the task board and the MCP tool layer)
can catch a single base class and turn it into a user-facing notification.

Hierarchy:
    TaskFlowError
    ├── TaskFlowAuthenticationError     no authenticated principal
    ├── TaskFlowValidationError         malformed input to a mutation
    ├── TaskFlowNotFoundError           referenced document absent
    ├── TaskFlowStoreUnavailableError   document store call failed
    └── TaskFlowConfigurationError      invalid settings at startup
"""

from __future__ import annotations

from typing import Any


class TaskFlowError(Exception):
    """Base exception for all TaskFlow errors."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.details = details or {}

    def __str__(self) -> str:
        if self.operation:
            return f"{self.message} (operation: {self.operation})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Structured error body for machine-readable responses."""
        body: dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.operation:
            body["operation"] = self.operation
        if self.details:
            body["details"] = self.details
        return body


class TaskFlowAuthenticationError(TaskFlowError):
    """Raised when an operation requires an authenticated principal and none is present."""


class TaskFlowValidationError(TaskFlowError):
    """Raised when mutation input is malformed (missing field, bad enum value)."""

    @classmethod
    def from_pydantic(cls, exc: Any, *, operation: str | None = None) -> TaskFlowValidationError:
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        summary = "; ".join(
            f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors
        )
        return cls(
            f"Invalid input: {summary}" if summary else "Invalid input",
            operation=operation,
            details={"errors": errors},
        )


class TaskFlowNotFoundError(TaskFlowError):
    """Raised when a referenced task or preferences document does not exist."""


class TaskFlowStoreUnavailableError(TaskFlowError):
    """Raised when the underlying document store call fails for any reason."""


class TaskFlowConfigurationError(TaskFlowError):
    """Raised when the service is misconfigured."""
