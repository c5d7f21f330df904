"""
Declarative recipe loader — data documents → Recipe contract.

Documents live as YAML or JSON files (packaged ones in
``envkit/recipes/data/``, user ones in configured directories). This
module validates them and wraps each in a :class:`DataRecipe` whose
``resolve`` substitutes ``{{preset}}`` into the step fields.

Only ``id``, ``label``, ``cmd`` and ``checkCmd`` are templated;
``env``, ``paths`` and ``files`` pass through verbatim.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from envkit.core.errors import ConfigError, EnvkitError, TemplateSubstitutionError
from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.models.recipe_document import RecipeDocument
from envkit.core.models.validation import validate_document
from envkit.core.recipe import Recipe

logger = logging.getLogger(__name__)

RECIPE_SUFFIXES = (".yml", ".yaml", ".json")

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def substitute(text: str, variables: Mapping[str, str]) -> str:
    """Replace every ``{{name}}`` in ``text``.

    Raises:
        TemplateSubstitutionError: a placeholder has no value.
    """

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in variables:
            raise TemplateSubstitutionError(key, hint="Pass --preset to provide a value.")
        return variables[key]

    return _PLACEHOLDER.sub(_replace, text)


class DataRecipe(Recipe):
    """A recipe backed by a validated :class:`RecipeDocument`."""

    def __init__(self, document: RecipeDocument, source: Path | None = None):
        self.document = document
        self.source = source
        self.name = document.name
        self.description = document.description
        self.depends = tuple(document.depends)
        self.verify = document.verify

    def variables(self, context: UseContext) -> dict[str, str]:
        """Template values for ``context``: the preset, else the default."""
        preset = context.preset if context.preset is not None else self.document.default_preset
        return {"preset": preset} if preset else {}

    def resolve(self, context: UseContext) -> ExecutionPlan:
        variables = self.variables(context)
        steps = [
            InstallStep(
                id=substitute(step.id, variables),
                label=substitute(step.label, variables),
                cmd=substitute(step.cmd, variables),
                check_cmd=substitute(step.check_cmd, variables) if step.check_cmd else None,
            )
            for step in self.document.install_steps
        ]
        return ExecutionPlan(
            install_steps=steps,
            env=dict(self.document.env),
            paths=list(self.document.paths),
            files=list(self.document.files),
        )


def load_data_recipe(data: Any, source: Path | None = None) -> DataRecipe:
    """Validate a parsed document and wrap it as a recipe.

    Raises:
        ValidationError: the document does not match the schema.
    """
    return DataRecipe(validate_document(data), source=source)


def load_recipe_file(path: Path) -> DataRecipe:
    """Load one recipe document from a ``.yml``/``.yaml``/``.json`` file.

    Raises:
        ConfigError: the file cannot be read or parsed.
        ValidationError: the parsed document does not match the schema.
    """
    if path.suffix not in RECIPE_SUFFIXES:
        raise ConfigError(f"Unsupported recipe file type: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = json.loads(raw) if path.suffix == ".json" else yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    recipe = load_data_recipe(data, source=path)
    logger.debug("Loaded recipe: %s from %s", recipe.name, path)
    return recipe


def discover_recipes(recipes_dir: Path) -> list[DataRecipe]:
    """Load every recipe document in a directory, sorted by file name.

    A document that fails to load is logged and skipped so one broken
    user file does not take the whole registry down.
    """
    recipes: list[DataRecipe] = []

    if not recipes_dir.is_dir():
        logger.debug("Recipes directory not found: %s", recipes_dir)
        return recipes

    for child in sorted(recipes_dir.iterdir()):
        if not child.is_file() or child.suffix not in RECIPE_SUFFIXES:
            continue
        try:
            recipes.append(load_recipe_file(child))
        except EnvkitError as e:
            logger.warning("Failed to load recipe from %s: %s", child, e)

    logger.info("Discovered %d recipe(s) in %s", len(recipes), recipes_dir)
    return recipes
