"""
Dependency resolver — target name + registry → execution order (pure).

Depth-first over ``depends`` with three-state marking. A node is
emitted right after all of its dependencies (postorder), so every
dependency precedes its dependents and a shared dependency appears
once, the first time it is reached.

No I/O, and never calls ``Recipe.resolve``.
"""

from __future__ import annotations

from collections.abc import Mapping

from envkit.core.errors import (
    CircularDependencyError,
    MissingDependencyError,
    TargetNotFoundError,
)
from envkit.core.recipe import Recipe

_IN_PROGRESS = 1
_DONE = 2


def resolve_dependencies(target: str, registry: Mapping[str, Recipe]) -> list[str]:
    """Linearise ``target`` and its transitive dependencies.

    Args:
        target: The requested runtime name.
        registry: Recipe lookup. Only the subgraph reachable from
            ``target`` is examined.

    Returns:
        Names in execution order; ``target`` is last.

    Raises:
        TargetNotFoundError: ``target`` is not in the registry.
        MissingDependencyError: a reachable recipe depends on an absent name.
        CircularDependencyError: a cycle is reachable; carries the path from
            ``target`` to the repeated node (e.g. ``a -> b -> c -> a``).
    """
    if target not in registry:
        raise TargetNotFoundError(target)

    order: list[str] = []
    marks: dict[str, int] = {}

    def walk(name: str, chain: list[str]) -> None:
        state = marks.get(name)
        if state == _DONE:
            return
        if state == _IN_PROGRESS:
            raise CircularDependencyError([*chain, name])

        recipe = registry.get(name)
        if recipe is None:
            raise MissingDependencyError(chain[-1], name)

        marks[name] = _IN_PROGRESS
        for dep in recipe.depends:
            walk(dep, [*chain, name])
        marks[name] = _DONE
        order.append(name)

    walk(target, [])
    return order
