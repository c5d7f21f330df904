"""
WordPress — served by nginx through PHP-FPM, stored in MariaDB.

The preset names the database (default ``wordpress``). Everything the
site needs is a dependency, so by the time these steps run nginx is
up, PHP-FPM is listening and MariaDB answers.
"""

from __future__ import annotations

import secrets
import shlex

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.recipe import PlatformRecipe
from envkit.recipes.base import apt_install_cmd, wait_step
from envkit.recipes.mysql import database_exists_cmd, quote_identifier

DEFAULT_DATABASE = "wordpress"
DOWNLOAD_URL = "https://wordpress.org/latest.tar.gz"

_SALT_NAMES = (
    "AUTH_KEY",
    "SECURE_AUTH_KEY",
    "LOGGED_IN_KEY",
    "NONCE_KEY",
    "AUTH_SALT",
    "SECURE_AUTH_SALT",
    "LOGGED_IN_SALT",
    "NONCE_SALT",
)


def _php_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def wp_config(database: str, user: str, password: str, host: str) -> str:
    """Contents of ``wp-config.php`` with freshly generated salts."""
    lines = [
        "<?php",
        f"define( 'DB_NAME', {_php_string(database)} );",
        f"define( 'DB_USER', {_php_string(user)} );",
        f"define( 'DB_PASSWORD', {_php_string(password)} );",
        f"define( 'DB_HOST', {_php_string(host)} );",
        "define( 'DB_CHARSET', 'utf8mb4' );",
        "define( 'DB_COLLATE', '' );",
        "",
    ]
    for name in _SALT_NAMES:
        lines.append(f"define( '{name}', '{secrets.token_hex(32)}' );")
    lines += [
        "",
        "$table_prefix = 'wp_';",
        "",
        "define( 'WP_DEBUG', false );",
        "",
        "if ( ! defined( 'ABSPATH' ) ) {",
        "    define( 'ABSPATH', __DIR__ . '/' );",
        "}",
        "",
        "require_once ABSPATH . 'wp-settings.php';",
    ]
    return "\n".join(lines)


def server_block(port: str, doc_root: str, fpm_listen: str) -> str:
    """An nginx ``server`` block that hands ``.php`` to PHP-FPM."""
    return f"""server {{
    listen {port} default_server;
    listen [::]:{port} default_server;
    root {doc_root};
    index index.php index.html;

    location / {{
        try_files $uri $uri/ /index.php?$args;
    }}

    location ~ \\.php$ {{
        include fastcgi_params;
        fastcgi_pass {fpm_listen};
        fastcgi_param SCRIPT_FILENAME $document_root$fastcgi_script_name;
        fastcgi_index index.php;
    }}

    location ~* \\.(js|css|png|jpg|jpeg|gif|ico|svg)$ {{
        expires max;
        log_not_found off;
    }}
}}"""


def _heredoc(body: str, target: str, delimiter: str) -> str:
    # quoted delimiter: the body is written without expansion
    return f"cat << '{delimiter}' {target}\n{body}\n{delimiter}"


def _download_step(doc_root: str, sudo: str) -> InstallStep:
    return InstallStep(
        id="download-wordpress",
        label="Download WordPress",
        cmd=(
            f"{sudo}mkdir -p {doc_root} && {sudo}rm -rf {doc_root}/* && "
            f"curl -sL {DOWNLOAD_URL} | {sudo}tar xzf - -C {doc_root}/ --strip-components=1"
        ),
        check_cmd=f"test -f {doc_root}/wp-login.php",
    )


def _wait_for_site(port: str) -> InstallStep:
    up = f"curl -sfL http://localhost:{port}/ 2>/dev/null | grep -qi wordpress"
    return wait_step("wait-for-wordpress", "Wait for WordPress to be ready", up, "WordPress")


class WordpressRecipe(PlatformRecipe):
    name = "wordpress"
    description = "WordPress CMS on nginx, PHP-FPM and MariaDB"
    depends = ("nginx", "php-fpm", "mysql")
    verify = "curl -sfL http://localhost/ | grep -qi wordpress"

    def resolve_darwin(self, context: UseContext) -> ExecutionPlan:
        database = context.preset or DEFAULT_DATABASE
        root = self.probe.query(["brew", "--prefix"]) or "/usr/local"
        conf_dir = f"{root}/etc/nginx"
        doc_root = f"{root}/var/www"
        port = "8080"
        client = "mariadb -u root"

        sql = f"CREATE DATABASE IF NOT EXISTS {quote_identifier(database)}"
        config = wp_config(database, user="root", password="", host="127.0.0.1")
        server = server_block(port, doc_root, "127.0.0.1:9000")

        return ExecutionPlan(
            install_steps=[
                InstallStep(
                    id="setup-wp-database",
                    label=f"Create WordPress database '{database}'",
                    cmd=f"{client} -e {shlex.quote(sql)}",
                    check_cmd=database_exists_cmd(database, client),
                ),
                _download_step(doc_root, sudo=""),
                InstallStep(
                    id="configure-wordpress",
                    label="Configure WordPress",
                    cmd=_heredoc(config, f"> {doc_root}/wp-config.php", "WPEOF"),
                    check_cmd=f"test -f {doc_root}/wp-config.php",
                ),
                InstallStep(
                    id="configure-nginx-wp",
                    label="Configure Nginx for WordPress",
                    cmd=(
                        f"mkdir -p {conf_dir}/servers && "
                        + _heredoc(server, f"> {conf_dir}/servers/wordpress.conf", "NGINXEOF")
                    ),
                    check_cmd=f"test -f {conf_dir}/servers/wordpress.conf",
                ),
                InstallStep(
                    id="reload-nginx",
                    label="Reload Nginx",
                    cmd="brew services restart nginx",
                ),
                _wait_for_site(port),
            ],
            env={"WORDPRESS_URL": f"http://localhost:{port}"},
            paths=[],
        )

    def resolve_linux(self, context: UseContext) -> ExecutionPlan:
        database = context.preset or DEFAULT_DATABASE
        conf_dir = "/etc/nginx"
        doc_root = "/var/www/html"
        port = "80"
        db_user = "'wordpress'@'localhost'"

        ident = quote_identifier(database)
        sql = (
            f"CREATE DATABASE IF NOT EXISTS {ident}; "
            f"CREATE USER IF NOT EXISTS {db_user} IDENTIFIED BY 'wordpress'; "
            f"GRANT ALL PRIVILEGES ON {ident}.* TO {db_user}; "
            "FLUSH PRIVILEGES;"
        )
        config = wp_config(database, user="wordpress", password="wordpress", host="localhost")
        server = server_block(port, doc_root, "unix:/run/php/php-fpm.sock")
        site = f"{conf_dir}/sites-available/wordpress"

        return ExecutionPlan(
            install_steps=[
                InstallStep(
                    id="install-wp-extensions",
                    label="Install WordPress PHP extensions",
                    cmd=apt_install_cmd("php-mysql", "php-gd", "php-intl", "php-curl"),
                    check_cmd="php -m | grep -qi mysqli",
                ),
                InstallStep(
                    id="restart-php-fpm",
                    label="Restart PHP-FPM to load new extensions",
                    cmd=(
                        "if command -v systemctl >/dev/null 2>&1 && "
                        'systemctl is-system-running 2>/dev/null | grep -qE "running|degraded"; then '
                        "sudo systemctl restart \"$(systemctl list-unit-files 'php*-fpm*' --no-legend "
                        "| awk '{print $1}' | head -1)\"; "
                        "else sudo pkill php-fpm || true; sleep 1; "
                        "FPM=$(find /usr/sbin -name 'php-fpm[0-9]*' -type f | head -1); "
                        'sudo "$FPM" --daemonize; fi'
                    ),
                ),
                wait_step(
                    "wait-for-php-fpm",
                    "Wait for PHP-FPM to come back",
                    "ls /run/php/php*-fpm.sock >/dev/null 2>&1",
                    "PHP-FPM",
                ),
                InstallStep(
                    id="setup-wp-database",
                    label=f"Create WordPress database '{database}' and user",
                    cmd=f"sudo mariadb -e {shlex.quote(sql)}",
                    check_cmd=database_exists_cmd(database, "sudo mariadb"),
                ),
                _download_step(doc_root, sudo="sudo "),
                InstallStep(
                    id="configure-wordpress",
                    label="Configure WordPress",
                    cmd=_heredoc(config, f"| sudo tee {doc_root}/wp-config.php > /dev/null", "WPEOF"),
                    check_cmd=f"test -f {doc_root}/wp-config.php",
                ),
                InstallStep(
                    id="set-wp-ownership",
                    label="Set WordPress file ownership",
                    cmd=f"sudo chown -R www-data:www-data {doc_root}",
                    check_cmd=(
                        f"test \"$(stat -c '%U' {doc_root}/wp-login.php 2>/dev/null)\" = \"www-data\""
                    ),
                ),
                InstallStep(
                    id="configure-nginx-wp",
                    label="Configure Nginx for WordPress",
                    cmd=(
                        _heredoc(server, f"| sudo tee {site} > /dev/null", "NGINXEOF")
                        + f"\nsudo ln -sf {site} {conf_dir}/sites-enabled/wordpress"
                        + f"\nsudo rm -f {conf_dir}/sites-enabled/default"
                    ),
                    check_cmd=f"test -f {site}",
                ),
                InstallStep(
                    id="reload-nginx",
                    label="Reload Nginx",
                    cmd=(
                        "if command -v systemctl >/dev/null 2>&1 && "
                        'systemctl is-system-running 2>/dev/null | grep -qE "running|degraded"; then '
                        "sudo systemctl reload nginx; else sudo nginx -s reload; fi"
                    ),
                ),
                _wait_for_site(port),
            ],
            env={"WORDPRESS_URL": f"http://localhost:{port}"},
            paths=[],
        )
