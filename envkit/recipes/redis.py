"""Redis in-memory data store."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_step, brew_step, systemd_or, wait_step

_PING = "redis-cli ping 2>/dev/null | grep -q PONG"
_ENV = {"REDIS_URL": "redis://localhost:6379"}


class RedisRecipe(PlatformRecipe):
    name = "redis"
    description = "Redis in-memory data structure store"
    verify = "redis-cli ping"

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        return ExecutionPlan(
            install_steps=[
                brew_step("install-redis", "Install Redis", "redis"),
                InstallStep(
                    id="start-redis",
                    label="Start Redis service",
                    cmd="brew services start redis",
                    check_cmd=_PING,
                ),
                wait_step("wait-for-redis", "Wait for Redis to be ready", _PING, "Redis"),
            ],
            env=dict(_ENV),
            paths=[],
        )

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        return ExecutionPlan(
            install_steps=[
                apt_step("install-redis", "Install Redis", "redis-server", "redis-tools"),
                InstallStep(
                    id="start-redis",
                    label="Start Redis service",
                    cmd=systemd_or("sudo redis-server --daemonize yes", "redis-server"),
                    check_cmd=_PING,
                ),
                wait_step("wait-for-redis", "Wait for Redis to be ready", _PING, "Redis"),
            ],
            env=dict(_ENV),
            paths=[],
        )
