"""Document store implementations."""

from taskflow_mcp.store.base import Document, DocumentStore
from taskflow_mcp.store.memory import InMemoryDocumentStore
from taskflow_mcp.store.file import JsonFileDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
]
