"""
Document store boundary.

The service depends on this Protocol rather than a concrete backend so the
managed document database can be swapped for the in-memory or JSON-file
implementations (and for test doubles).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(slots=True)
class Document:
    """A stored document: opaque id plus JSON-compatible data."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


class DocumentStore(Protocol):
    """Per-collection document store keyed by opaque string ids."""

    async def add(self, collection: str, data: dict[str, Any]) -> Document:
        """Insert a document; the store assigns the id and ``createdAt``."""
        ...

    async def get(self, collection: str, doc_id: str) -> Document | None: ...

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> Document:
        """Create or replace the document stored under ``doc_id``."""
        ...

    async def update(
        self, collection: str, doc_id: str, changes: dict[str, Any]
    ) -> Document | None:
        """Merge ``changes`` into an existing document. None if absent."""
        ...

    async def delete(self, collection: str, doc_id: str) -> bool: ...

    async def query(self, collection: str, field: str, value: Any) -> list[Document]:
        """Return documents whose ``field`` equals ``value``, in no particular order."""
        ...

    async def close(self) -> None: ...
