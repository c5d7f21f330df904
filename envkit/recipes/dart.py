"""Dart SDK via Homebrew."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import brew_step

_FALLBACK_PREFIX = "/usr/local/opt/dart-sdk"


class DartRecipe(PlatformRecipe):
    name = "dart"
    description = "Dart SDK via Homebrew"
    verify = "dart --version"

    def _brew_plan(self) -> ExecutionPlan:
        prefix = self.brew_prefix("dart-sdk", _FALLBACK_PREFIX)
        return ExecutionPlan(
            install_steps=[brew_step("install-dart", "Install Dart SDK", "dart-sdk")],
            env={"DART_SDK": f"{prefix}/libexec"},
            paths=[f"{prefix}/bin"],
        )

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        return self._brew_plan()

    # Homebrew on Linux uses the same formula
    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        return self._brew_plan()
