"""
TaskFlow MCP Server - personal task management over the Model Context Protocol.

This package provides an MCP server for a per-user task manager: tasks with
due dates and priorities, filtering, search and sorting, derived categories,
a calendar view, analytics and user preferences.

Architecture:
    MCP Tools Layer
         │
         ▼
    TaskFlow Client (session, board, mutation coordinator)
         │
    ┌────┴─────────────┐
    ▼                  ▼
  Derivation        Repository
  Pipeline             │
                       ▼
                 Backend (document store boundary)
"""

__version__ = "0.1.0"
__author__ = "TaskFlow MCP Contributors"

from taskflow_mcp.exceptions import (
    TaskFlowError,
    TaskFlowAuthenticationError,
    TaskFlowValidationError,
    TaskFlowNotFoundError,
    TaskFlowStoreUnavailableError,
    TaskFlowConfigurationError,
)

__all__ = [
    "__version__",
    "TaskFlowError",
    "TaskFlowAuthenticationError",
    "TaskFlowValidationError",
    "TaskFlowNotFoundError",
    "TaskFlowStoreUnavailableError",
    "TaskFlowConfigurationError",
]
