"""Deno runtime."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_step, brew_step

DENO_DIR = "$HOME/.deno"


class DenoRecipe(PlatformRecipe):
    name = "deno"
    description = "Deno runtime"
    verify = "deno --version"

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        prefix = self.brew_prefix("deno", "/usr/local/opt/deno")
        return ExecutionPlan(
            install_steps=[brew_step("install-deno", "Install Deno", "deno")],
            env={"DENO_DIR": DENO_DIR},
            paths=[f"{prefix}/bin"],
        )

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        return ExecutionPlan(
            install_steps=[
                apt_step("install-deno-prereqs", "Install prerequisites", "unzip"),
                InstallStep(
                    id="install-deno",
                    label="Install Deno",
                    cmd="curl -fsSL https://deno.land/install.sh | sh",
                    check_cmd=f"test -f {DENO_DIR}/bin/deno",
                ),
            ],
            env={"DENO_DIR": DENO_DIR},
            paths=[f"{DENO_DIR}/bin"],
        )
