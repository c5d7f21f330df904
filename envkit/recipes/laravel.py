"""Laravel installer through Composer."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe


class LaravelRecipe(PlatformRecipe):
    name = "laravel"
    description = "Laravel PHP framework installer"
    depends = ("php",)
    verify = "laravel --version"

    def _composer_plan(self) -> ExecutionPlan:
        return ExecutionPlan(
            install_steps=[
                InstallStep(
                    id="install-laravel-installer",
                    label="Install Laravel installer",
                    cmd="composer global require laravel/installer",
                    check_cmd="laravel --version",
                ),
            ],
            env={},
            paths=[],
        )

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        return self._composer_plan()

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        return self._composer_plan()
