"""
Built-in recipes — Python recipe classes plus packaged data documents.

    from envkit.recipes import builtin_registry
    registry = builtin_registry()

Platform and probe are injected into every Python recipe so the whole
registry can be resolved for any OS in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from envkit.adapters.base import Probe
from envkit.adapters.platform import Platform, detect_platform
from envkit.adapters.shell.probe import SystemProbe
from envkit.core.config.recipe_loader import discover_recipes
from envkit.core.recipe import PlatformRecipe
from envkit.core.registry import Registry
from envkit.recipes.dart import DartRecipe
from envkit.recipes.deno import DenoRecipe
from envkit.recipes.laravel import LaravelRecipe
from envkit.recipes.mysql import MysqlRecipe
from envkit.recipes.nginx import NginxRecipe
from envkit.recipes.php import PhpRecipe
from envkit.recipes.php_fpm import PhpFpmRecipe
from envkit.recipes.php_sqlite import PhpSqliteRecipe
from envkit.recipes.postgres import PostgresRecipe
from envkit.recipes.redis import RedisRecipe
from envkit.recipes.ruby import RubyRecipe
from envkit.recipes.wordpress import WordpressRecipe

logger = logging.getLogger(__name__)

# Packaged declarative recipe documents
DATA_DIR = Path(__file__).parent / "data"

PLATFORM_RECIPES: tuple[type[PlatformRecipe], ...] = (
    DartRecipe,
    DenoRecipe,
    LaravelRecipe,
    MysqlRecipe,
    NginxRecipe,
    PhpRecipe,
    PhpFpmRecipe,
    PhpSqliteRecipe,
    PostgresRecipe,
    RedisRecipe,
    RubyRecipe,
    WordpressRecipe,
)


def builtin_registry(
    platform: Platform | None = None,
    probe: Probe | None = None,
    extra_dirs: Iterable[Path] = (),
) -> Registry:
    """Assemble the registry.

    Order of precedence (later wins): Python recipes, packaged
    documents, then documents from each of ``extra_dirs`` in order.
    """
    platform = platform if platform is not None else detect_platform()
    probe = probe if probe is not None else SystemProbe()

    recipes = [cls(platform=platform, probe=probe) for cls in PLATFORM_RECIPES]
    registry = Registry(recipes).merged(discover_recipes(DATA_DIR))

    for directory in extra_dirs:
        registry = registry.merged(discover_recipes(directory))

    logger.debug("Registry for %s: %s", platform.value, registry.names())
    return registry


__all__ = [
    "DATA_DIR",
    "PLATFORM_RECIPES",
    "builtin_registry",
]
