"""Ruby with a per-user gem home."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_step, brew_step

GEM_HOME = "$HOME/.gem/ruby"


class RubyRecipe(PlatformRecipe):
    name = "ruby"
    description = "Ruby programming language"
    verify = "ruby --version && gem --version"

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        prefix = self.brew_prefix("ruby", "/usr/local/opt/ruby")
        return ExecutionPlan(
            install_steps=[brew_step("install-ruby", "Install Ruby", "ruby")],
            env={"GEM_HOME": GEM_HOME},
            paths=[f"{prefix}/bin", f"{GEM_HOME}/bin"],
        )

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        return ExecutionPlan(
            install_steps=[
                apt_step("install-ruby-prereqs", "Install build prerequisites", "build-essential"),
                apt_step("install-ruby", "Install Ruby", "ruby-full"),
            ],
            env={"GEM_HOME": GEM_HOME},
            paths=[f"{GEM_HOME}/bin"],
        )
