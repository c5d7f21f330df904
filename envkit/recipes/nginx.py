"""Nginx web server."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_step, brew_step, systemd_or, wait_step


def _responding(port: int) -> str:
    return f"curl -sf http://localhost:{port}/ >/dev/null 2>&1"


class NginxRecipe(PlatformRecipe):
    name = "nginx"
    description = "Nginx web server"
    verify = _responding(80)

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        # config lives under the Homebrew root, not the nginx keg
        root = self.probe.query(["brew", "--prefix"]) or "/usr/local"
        up = _responding(8080)
        return ExecutionPlan(
            install_steps=[
                brew_step("install-nginx", "Install Nginx", "nginx"),
                InstallStep(
                    id="start-nginx",
                    label="Start Nginx service",
                    cmd="brew services start nginx",
                    check_cmd=up,
                ),
                wait_step("wait-for-nginx", "Wait for Nginx to be ready", up, "Nginx"),
            ],
            env={
                "NGINX_CONF_DIR": f"{root}/etc/nginx",
                "NGINX_DOC_ROOT": f"{root}/var/www",
                "NGINX_PORT": "8080",
            },
            paths=[],
        )

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        up = _responding(80)
        return ExecutionPlan(
            install_steps=[
                apt_step("install-nginx", "Install Nginx", "nginx"),
                InstallStep(
                    id="start-nginx",
                    label="Start Nginx service",
                    cmd=systemd_or("sudo nginx", "nginx"),
                    check_cmd=up,
                ),
                wait_step("wait-for-nginx", "Wait for Nginx to be ready", up, "Nginx"),
            ],
            env={
                "NGINX_CONF_DIR": "/etc/nginx",
                "NGINX_DOC_ROOT": "/var/www/html",
                "NGINX_PORT": "80",
            },
            paths=[],
        )
