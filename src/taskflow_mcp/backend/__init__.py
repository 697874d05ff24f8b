"""Document-store backed data access layer."""

from taskflow_mcp.backend.api import TaskFlowBackend

__all__ = ["TaskFlowBackend"]
