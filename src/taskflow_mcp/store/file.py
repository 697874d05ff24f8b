"""JSON-snapshot document store for local runs."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from taskflow_mcp.store.memory import InMemoryDocumentStore

logger = logging.getLogger(__name__)


class JsonFileDocumentStore(InMemoryDocumentStore):
    """
    In-memory store that snapshots every collection to a JSON file.

    The whole file is rewritten on a worker thread before each write is
    committed (tmp file + os.replace), which is fine for the small per-user
    data sets this service targets.
    """

    def __init__(self, path: str | Path, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._path = Path(path).expanduser()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            logger.info("Document store file %s not found; starting empty", self._path)
            return
        raw = json.loads(self._path.read_text("utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Malformed document store file: {self._path}")
        for name, docs in raw.items():
            if isinstance(name, str) and isinstance(docs, dict):
                self._collections[name] = {
                    str(doc_id): data for doc_id, data in docs.items() if isinstance(data, dict)
                }
        logger.info(
            "Loaded document store %s (%d collections)", self._path, len(self._collections)
        )

    async def _persist(self, collections: dict[str, dict[str, dict[str, Any]]]) -> None:
        await asyncio.to_thread(self._write_snapshot, collections)

    def _write_snapshot(self, collections: dict[str, dict[str, dict[str, Any]]]) -> None:
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(collections, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            # Holds password hashes; keep it private on disk.
            os.chmod(self._path, 0o600)
