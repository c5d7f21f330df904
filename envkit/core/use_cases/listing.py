"""
List use case — what recipes are available, without resolving any.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from envkit.core.registry import Registry


@dataclass
class ListResult:
    """Every registry entry's metadata."""

    recipes: list[dict[str, Any]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.recipes)

    def to_dict(self) -> dict:
        return {"count": self.count, "recipes": list(self.recipes)}


def list_recipes(registry: Registry) -> ListResult:
    """Enumerate name/description/depends/verify. Never calls ``resolve``."""
    return ListResult(recipes=registry.describe())
