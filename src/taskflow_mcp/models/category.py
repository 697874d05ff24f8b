"""Derived category models (never persisted)."""

from __future__ import annotations

from pydantic import BaseModel


class CategoryCounts(BaseModel):
    """Summary counts over a user's full task set."""

    important: int = 0
    in_progress: int = 0
    completed: int = 0


class Category(BaseModel):
    """A derived category with its live count."""

    id: str
    name: str
    color: str
    description: str
    count: int = 0
