"""MySQL-compatible database (MariaDB), optionally with a database named by the preset."""

from __future__ import annotations

import shlex

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_step, brew_step, systemd_or, wait_step


def quote_identifier(name: str) -> str:
    """Backtick-quote a MySQL identifier."""
    return "`" + name.replace("`", "``") + "`"


def database_exists_cmd(database: str, client: str) -> str:
    return f"{client} -N -e 'SHOW DATABASES' | grep -qxF -- {shlex.quote(database)}"


def create_database_step(database: str, client: str) -> InstallStep:
    sql = f"CREATE DATABASE IF NOT EXISTS {quote_identifier(database)}"
    return InstallStep(
        id="create-database",
        label=f"Create database '{database}'",
        cmd=f"{client} -e {shlex.quote(sql)}",
        check_cmd=database_exists_cmd(database, client),
    )


class MysqlRecipe(PlatformRecipe):
    name = "mysql"
    description = "MySQL compatible relational database (MariaDB)"
    verify = "mysqladmin ping"

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        ping = "mysqladmin ping -u root 2>/dev/null"
        steps = [
            brew_step("install-mariadb", "Install MariaDB", "mariadb"),
            InstallStep(
                id="start-mariadb",
                label="Start MariaDB service",
                cmd="brew services start mariadb",
                check_cmd=ping,
            ),
            wait_step("wait-for-mariadb", "Wait for MariaDB to be ready", ping, "MariaDB"),
        ]
        if context.preset:
            steps.append(create_database_step(context.preset, "mariadb -u root"))

        return ExecutionPlan(install_steps=steps, env={"MYSQL_HOST": "127.0.0.1"}, paths=[])

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        ping = "mysqladmin ping 2>/dev/null"
        start = systemd_or("(sudo mysqld_safe --skip-syslog &)", "mariadb")
        steps = [
            apt_step("install-mariadb", "Install MariaDB", "mariadb-server", "mariadb-client"),
            InstallStep(
                id="start-mariadb",
                label="Start MariaDB service",
                cmd=f"sudo mkdir -p /run/mysqld && sudo chown mysql:mysql /run/mysqld && {start}",
                check_cmd=ping,
            ),
            wait_step("wait-for-mariadb", "Wait for MariaDB to be ready", ping, "MariaDB"),
            InstallStep(
                id="setup-user",
                label="Create MariaDB user for current user",
                cmd=(
                    "sudo mariadb -e \"CREATE USER IF NOT EXISTS '$(whoami)'@'localhost' "
                    "IDENTIFIED VIA unix_socket; "
                    "GRANT ALL PRIVILEGES ON *.* TO '$(whoami)'@'localhost' WITH GRANT OPTION; "
                    'FLUSH PRIVILEGES;"'
                ),
                check_cmd='mariadb -e "SELECT 1" 2>/dev/null',
            ),
        ]
        if context.preset:
            steps.append(create_database_step(context.preset, "mariadb"))

        # localhost means the unix socket for Linux clients
        return ExecutionPlan(install_steps=steps, env={"MYSQL_HOST": "localhost"}, paths=[])
