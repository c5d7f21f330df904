"""PHP SQLite extension."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_step


class PhpSqliteRecipe(PlatformRecipe):
    name = "php-sqlite"
    description = "PHP SQLite extension"
    depends = ("php",)
    verify = "php -m | grep -qi sqlite"

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        # Homebrew PHP ships with SQLite
        return ExecutionPlan(install_steps=[], env={}, paths=[])

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        return ExecutionPlan(
            install_steps=[
                apt_step("install-php-sqlite", "Install PHP SQLite extension", "php-sqlite3"),
            ],
            env={},
            paths=[],
        )
