"""
Recipe registry — the immutable name → Recipe mapping.

The registry is passed explicitly to the resolver and the use flow;
there is no module-level instance. It is never validated in bulk:
cycles and missing names surface only when a target that reaches
them is resolved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from envkit.core.recipe import Recipe

logger = logging.getLogger(__name__)


class Registry(Mapping[str, Recipe]):
    """Read-only mapping of recipe name to recipe.

    Later recipes with the same name replace earlier ones (with a
    warning), which is how user documents override built-ins.
    """

    def __init__(self, recipes: Iterable[Recipe] = ()):
        entries: dict[str, Recipe] = {}
        for recipe in recipes:
            if not recipe.name:
                raise ValueError(f"Recipe {recipe!r} has no name")
            if recipe.name in entries:
                logger.warning("Overriding recipe: %s", recipe.name)
            entries[recipe.name] = recipe
        self._recipes = MappingProxyType(entries)

    def __getitem__(self, name: str) -> Recipe:
        return self._recipes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._recipes)

    def __len__(self) -> int:
        return len(self._recipes)

    def merged(self, recipes: Iterable[Recipe]) -> Registry:
        """New registry with ``recipes`` layered on top of this one."""
        return Registry([*self._recipes.values(), *recipes])

    def names(self) -> list[str]:
        """All recipe names, sorted."""
        return sorted(self._recipes)

    def describe(self) -> list[dict[str, Any]]:
        """Name, description, depends and verify of every recipe.

        Never calls ``resolve``.
        """
        return [
            {
                "name": recipe.name,
                "description": recipe.description,
                "depends": list(recipe.depends),
                "verify": recipe.verify,
            }
            for recipe in (self._recipes[n] for n in self.names())
        ]

    def __repr__(self) -> str:
        return f"<Registry recipes={self.names()!r}>"
