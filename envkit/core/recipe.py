"""
Recipe contract — how the engine sees a runtime.

A recipe is a named capability that turns a :class:`UseContext` into
an :class:`ExecutionPlan`. The engine never inspects what its install
commands do; it only relies on this contract.

``resolve`` MUST be read-only with respect to installed software. It
may probe the host (through a :class:`Probe`) but never install or
mutate anything.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from envkit.adapters.base import Probe
from envkit.adapters.platform import Platform, detect_platform
from envkit.adapters.shell.probe import SystemProbe
from envkit.core.errors import UnsupportedPlatformError
from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan


class Recipe(ABC):
    """Abstract base class for all recipes.

    To create a new recipe:
        1. Subclass Recipe (or PlatformRecipe)
        2. Set name, description, and optionally depends / verify
        3. Implement resolve (or the per-platform branches)
        4. Add it to the registry
    """

    name: str = ""
    description: str = ""
    depends: tuple[str, ...] = ()
    verify: str | None = None      # diagnostic only, never executed by the engine

    @abstractmethod
    def resolve(self, context: UseContext) -> ExecutionPlan:
        """Produce the plan for this runtime."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class PlatformRecipe(Recipe):
    """A recipe with one branch per supported operating system.

    The platform is chosen once, at construction, from an injected
    value (or host detection when none is given). A branch that is
    not overridden means the platform is unsupported.
    """

    def __init__(self, platform: Platform | None = None, probe: Probe | None = None):
        self.platform = platform if platform is not None else detect_platform()
        self.probe = probe if probe is not None else SystemProbe()

    def resolve(self, context: UseContext) -> ExecutionPlan:
        if self.platform is Platform.DARWIN:
            return self.resolve_darwin(context)
        if self.platform is Platform.LINUX:
            return self.resolve_linux(context)
        raise UnsupportedPlatformError(self.name, self.platform.value)

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        raise UnsupportedPlatformError(self.name, Platform.DARWIN.value)

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        raise UnsupportedPlatformError(self.name, Platform.LINUX.value)

    def brew_prefix(self, formula: str, fallback: str) -> str:
        """Probe Homebrew for ``formula``'s prefix, else use ``fallback``."""
        return self.probe.brew_prefix(formula) or fallback
