"""PostgreSQL, optionally with a database named by the preset."""

from __future__ import annotations

import shlex

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_step, brew_step, systemd_or, wait_step

_FORMULA = "postgresql@16"


def create_database_step(database: str) -> InstallStep:
    quoted = shlex.quote(database)
    return InstallStep(
        id="create-database",
        label=f"Create database '{database}'",
        cmd=f"createdb {quoted}",
        check_cmd=f"psql -Atc 'SELECT datname FROM pg_database' | grep -qxF -- {quoted}",
    )


class PostgresRecipe(PlatformRecipe):
    name = "postgres"
    description = "PostgreSQL relational database"
    verify = "psql -c 'SELECT 1'"

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        steps = [
            brew_step("install-postgres", "Install PostgreSQL", _FORMULA),
            InstallStep(
                id="start-postgres",
                label="Start PostgreSQL service",
                cmd=f"brew services start {_FORMULA}",
                check_cmd="pg_isready",
            ),
            wait_step("wait-for-postgres", "Wait for PostgreSQL to be ready", "pg_isready", "PostgreSQL"),
        ]
        if context.preset:
            steps.append(create_database_step(context.preset))

        prefix = self.brew_prefix(_FORMULA, f"/usr/local/opt/{_FORMULA}")
        return ExecutionPlan(
            install_steps=steps,
            env={"PGHOST": "localhost"},
            paths=[f"{prefix}/bin"],
        )

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        start_cluster = (
            "sudo pg_ctlcluster $(pg_lsclusters -h | head -1 | awk '{print $1, $2}') start"
        )
        steps = [
            apt_step("install-postgres", "Install PostgreSQL", "postgresql", "postgresql-client"),
            InstallStep(
                id="start-postgres",
                label="Start PostgreSQL service",
                cmd=systemd_or(start_cluster, "postgresql"),
                check_cmd="pg_isready",
            ),
            wait_step("wait-for-postgres", "Wait for PostgreSQL to be ready", "pg_isready", "PostgreSQL"),
            InstallStep(
                id="setup-user",
                label="Create PostgreSQL user for current user",
                cmd=(
                    "sudo -u postgres createuser -s $(whoami); "
                    "sudo -u postgres createdb -O $(whoami) $(whoami)"
                ),
                check_cmd="psql -c 'SELECT 1' 2>/dev/null",
            ),
        ]
        if context.preset:
            steps.append(create_database_step(context.preset))

        return ExecutionPlan(
            install_steps=steps,
            env={"PGHOST": "/var/run/postgresql"},
            paths=[],
        )
