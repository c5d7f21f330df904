"""PHP with Composer."""

from __future__ import annotations

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_step, brew_step

COMPOSER_HOME = "$HOME/.config/composer"
COMPOSER_BIN = f"{COMPOSER_HOME}/vendor/bin"


class PhpRecipe(PlatformRecipe):
    name = "php"
    description = "PHP programming language with Composer"
    verify = "php --version && composer --version"

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        prefix = self.brew_prefix("php", "/usr/local/opt/php")
        return ExecutionPlan(
            install_steps=[
                brew_step("install-php", "Install PHP", "php"),
                brew_step("install-composer", "Install Composer", "composer"),
            ],
            env={"COMPOSER_HOME": COMPOSER_HOME},
            paths=[f"{prefix}/bin", COMPOSER_BIN],
        )

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        return ExecutionPlan(
            install_steps=[
                apt_step(
                    "install-php", "Install PHP",
                    "php-cli", "php-common", "php-mbstring", "php-xml",
                    "php-curl", "php-zip", "unzip",
                ),
                InstallStep(
                    id="install-composer",
                    label="Install Composer",
                    cmd=(
                        "curl -sS https://getcomposer.org/installer | sudo php -- "
                        "--install-dir=/usr/local/bin --filename=composer"
                    ),
                    check_cmd="which composer",
                ),
            ],
            env={"COMPOSER_HOME": COMPOSER_HOME},
            paths=[COMPOSER_BIN],
        )
