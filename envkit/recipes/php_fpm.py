"""PHP FastCGI Process Manager."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_install_cmd, systemd_or, wait_step

_SOCKET_GLOB = "/run/php/php*-fpm.sock"
_SOCKET = "/run/php/php-fpm.sock"


class PhpFpmRecipe(PlatformRecipe):
    name = "php-fpm"
    description = "PHP FastCGI Process Manager"
    depends = ("php",)

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        # brew's php (installed by the php dependency) already includes FPM
        listening = "nc -z localhost 9000 2>/dev/null"
        return ExecutionPlan(
            install_steps=[
                InstallStep(
                    id="start-php-fpm",
                    label="Start PHP-FPM service",
                    cmd="brew services start php",
                    check_cmd=listening,
                ),
                wait_step("wait-for-php-fpm", "Wait for PHP-FPM to be ready", listening, "PHP-FPM"),
            ],
            env={"PHP_FPM_LISTEN": "127.0.0.1:9000"},
            paths=[],
        )

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        socket_ready = f"ls {_SOCKET_GLOB} >/dev/null 2>&1"
        start = systemd_or(
            fallback=(
                "FPM=$(find /usr/sbin -name 'php-fpm[0-9]*' -type f | head -1); "
                'sudo "$FPM" --daemonize'
            ),
            unit="\"$(systemctl list-unit-files 'php*-fpm*' --no-legend | awk '{print $1}' | head -1)\"",
        )
        return ExecutionPlan(
            install_steps=[
                InstallStep(
                    id="install-php-fpm",
                    label="Install PHP-FPM",
                    cmd=apt_install_cmd("php-fpm"),
                    check_cmd="ls /etc/php/*/fpm/php-fpm.conf >/dev/null 2>&1",
                ),
                InstallStep(
                    id="start-php-fpm",
                    label="Start PHP-FPM service",
                    cmd=f"sudo mkdir -p /run/php && {start}",
                    check_cmd=socket_ready,
                ),
                wait_step("wait-for-php-fpm", "Wait for PHP-FPM to be ready", socket_ready, "PHP-FPM"),
                InstallStep(
                    id="setup-fpm-socket",
                    label="Create versionless PHP-FPM socket symlink",
                    cmd=f"sudo ln -sf {_SOCKET_GLOB} {_SOCKET}",
                    check_cmd=f"test -S {_SOCKET}",
                ),
            ],
            env={"PHP_FPM_LISTEN": f"unix:{_SOCKET}"},
            paths=[],
        )
