"""
envkit — CLI entrypoint.

Usage:
    envkit --help
    envkit list
    envkit use php --dry-run
    envkit use postgres --preset app_dev
    envkit state show
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from envkit import __version__
from envkit.core.errors import EnvkitError
from envkit.core.observability.logging_config import (
    LOG_FILE_ENV_VAR,
    LOG_FILE_LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="envkit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to config.yml (default: ~/.config/envkit/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """envkit — provision language runtimes and services for development."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV_VAR),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV_VAR),
    )


def _fail(error: EnvkitError) -> None:
    click.secho(f"❌ Error [{error.category}]: {error}", fg="red", err=True)
    sys.exit(1)


def _load_settings(ctx: click.Context):
    from envkit.core.config.loader import load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except EnvkitError as e:
        _fail(e)


def _parse_options(values: tuple[str, ...]) -> dict[str, str | bool]:
    """``KEY=VALUE`` pairs; a bare ``KEY`` means True."""
    options: dict[str, str | bool] = {}
    for item in values:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--option")
        options[key] = value if sep else True
    return options


@cli.command()
@click.argument("runtime")
@click.option(
    "--version",
    "runtime_version",
    default=None,
    help="Requested runtime version (default: latest).",
)
@click.option("--preset", default=None, help="Preset value substituted into the recipe.")
@click.option("--dry-run", is_flag=True, help="Print the plan without executing anything.")
@click.option(
    "--option",
    "-o",
    "options",
    multiple=True,
    metavar="KEY[=VALUE]",
    help="Extra recipe option (repeatable).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output result as JSON.")
@click.pass_context
def use(
    ctx: click.Context,
    runtime: str,
    runtime_version: str | None,
    preset: str | None,
    dry_run: bool,
    options: tuple[str, ...],
    as_json: bool,
) -> None:
    """Provision RUNTIME and everything it depends on."""
    from envkit.adapters.shell.command import ShellCommandRunner
    from envkit.core.engine.executor import PlanExecutor
    from envkit.core.models.validation import build_context
    from envkit.core.persistence.state_file import ShellStateFile
    from envkit.core.use_cases.use import use_runtime
    from envkit.recipes import builtin_registry

    settings = _load_settings(ctx)
    quiet = ctx.obj.get("quiet", False)
    # JSON output must stay parseable; quiet keeps progress in the log
    echo = None if as_json or quiet else click.echo

    try:
        context = build_context(
            runtime=runtime,
            version=runtime_version,
            preset=preset,
            dry_run=dry_run,
            options=_parse_options(options),
        )
        registry = builtin_registry(extra_dirs=settings.recipe_dirs)
        executor = PlanExecutor(
            runner=ShellCommandRunner(state_file=settings.state_file),
            state=ShellStateFile(settings.state_file),
            echo=echo,
        )
        if echo:
            click.secho(f"[envkit] Resolving plan for {runtime}...", fg="cyan")
        result = use_runtime(context, registry, executor, echo=echo)
    except EnvkitError as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if quiet:
        return

    click.echo()
    if result.dry_run:
        click.secho(f"📋 Dry run complete: {' -> '.join(result.chain)}", fg="cyan")
        return

    click.secho(
        f"✅ {runtime} ready ({result.executed} executed, {result.skipped} skipped)",
        fg="green",
        bold=True,
    )
    click.echo(f"   Load it in this shell:  source {settings.state_file}")


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List available recipes."""
    from envkit.core.use_cases.listing import list_recipes
    from envkit.recipes import builtin_registry

    settings = _load_settings(ctx)
    try:
        result = list_recipes(builtin_registry(extra_dirs=settings.recipe_dirs))
    except EnvkitError as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho(f"\n📦 Recipes: {result.count}", fg="white", bold=True)
    for entry in result.recipes:
        depends = f" (depends: {', '.join(entry['depends'])})" if entry["depends"] else ""
        click.echo(f"     • {entry['name']}{depends}")
        if entry["description"]:
            click.echo(f"       {entry['description']}")
        if entry["verify"]:
            click.secho(f"       verify: {entry['verify']}", dim=True)
    click.echo()


# ── State ───────────────────────────────────────────────────────


@cli.group()
def state() -> None:
    """Inspect the persisted shell-environment state."""


@state.command("path")
@click.pass_context
def state_path(ctx: click.Context) -> None:
    """Print the state file location."""
    settings = _load_settings(ctx)
    click.echo(str(settings.state_file))


@state.command("show")
@click.pass_context
def state_show(ctx: click.Context) -> None:
    """Print the state file contents."""
    from envkit.core.persistence.state_file import ShellStateFile

    settings = _load_settings(ctx)
    state_file = ShellStateFile(settings.state_file)

    if not state_file.exists():
        click.secho(f"⚠️  No state yet at {state_file.path}", fg="yellow")
        return

    click.echo(state_file.read(), nl=False)
    if not ctx.obj.get("quiet", False):
        click.secho(f"\n# source {state_file.path}", fg="cyan", err=True)


if __name__ == "__main__":
    cli()
