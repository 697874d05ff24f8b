"""
In-memory document store.

Each write is staged on a copy, persisted, and only then committed, so a
failed write leaves no trace. Cross-document consistency is not provided.
Returned documents are copies, so callers never alias stored state.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from taskflow_mcp.store.base import Document

logger = logging.getLogger(__name__)

CREATED_AT_FIELD = "createdAt"


def _default_id() -> str:
    return secrets.token_hex(12)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDocumentStore:
    """Dictionary-backed DocumentStore implementation."""

    def __init__(
        self,
        *,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._id_factory = id_factory or _default_id
        self._clock = clock or _utc_now
        self._last_created: datetime | None = None
        self._lock = asyncio.Lock()

    # ---- helpers ----

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def _server_timestamp(self) -> str:
        """Creation timestamp, strictly increasing across inserts."""
        now = self._clock()
        if self._last_created is not None and now <= self._last_created:
            now = self._last_created + timedelta(microseconds=1)
        self._last_created = now
        return now.isoformat()

    def _new_id(self, collection: dict[str, dict[str, Any]]) -> str:
        doc_id = self._id_factory()
        while doc_id in collection:
            doc_id = self._id_factory()
        return doc_id

    @staticmethod
    def _snapshot(doc_id: str, data: dict[str, Any]) -> Document:
        return Document(id=doc_id, data=copy.deepcopy(data))

    def _staged(self, name: str) -> dict[str, dict[str, Any]]:
        """Shallow copy of a collection to apply a write to before committing."""
        return dict(self._collections.get(name, {}))

    async def _commit(self, name: str, docs: dict[str, dict[str, Any]]) -> None:
        """Persist the staged collection, then make it visible to readers."""
        collections = {**self._collections, name: docs}
        await self._persist(collections)
        self._collections = collections

    async def _persist(self, collections: dict[str, dict[str, dict[str, Any]]]) -> None:
        """Hook for subclasses that persist state before a write is committed."""

    # ---- DocumentStore API ----

    async def add(self, collection: str, data: dict[str, Any]) -> Document:
        async with self._lock:
            docs = self._staged(collection)
            doc_id = self._new_id(docs)
            stored = copy.deepcopy(data)
            stored[CREATED_AT_FIELD] = self._server_timestamp()
            docs[doc_id] = stored
            await self._commit(collection, docs)
            logger.debug("Added document %s/%s", collection, doc_id)
            return self._snapshot(doc_id, stored)

    async def get(self, collection: str, doc_id: str) -> Document | None:
        stored = self._collection(collection).get(doc_id)
        if stored is None:
            return None
        return self._snapshot(doc_id, stored)

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> Document:
        async with self._lock:
            docs = self._staged(collection)
            stored = copy.deepcopy(data)
            previous = docs.get(doc_id)
            if previous is not None and CREATED_AT_FIELD in previous:
                stored[CREATED_AT_FIELD] = previous[CREATED_AT_FIELD]
            else:
                stored[CREATED_AT_FIELD] = self._server_timestamp()
            docs[doc_id] = stored
            await self._commit(collection, docs)
            return self._snapshot(doc_id, stored)

    async def update(
        self, collection: str, doc_id: str, changes: dict[str, Any]
    ) -> Document | None:
        async with self._lock:
            docs = self._staged(collection)
            stored = docs.get(doc_id)
            if stored is None:
                return None
            merged = {**stored, **copy.deepcopy(changes)}
            merged[CREATED_AT_FIELD] = stored.get(CREATED_AT_FIELD)
            docs[doc_id] = merged
            await self._commit(collection, docs)
            return self._snapshot(doc_id, merged)

    async def delete(self, collection: str, doc_id: str) -> bool:
        async with self._lock:
            docs = self._staged(collection)
            if doc_id not in docs:
                return False
            del docs[doc_id]
            await self._commit(collection, docs)
            logger.debug("Deleted document %s/%s", collection, doc_id)
            return True

    async def query(self, collection: str, field: str, value: Any) -> list[Document]:
        return [
            self._snapshot(doc_id, data)
            for doc_id, data in self._collection(collection).items()
            if data.get(field) == value
        ]

    async def close(self) -> None:
        return None

    def count(self, collection: str) -> int:
        return len(self._collection(collection))
