"""
Configuration loader — reads config.yml into :class:`Settings`.

Lookup order:
    explicit path (``--config``)  >  ENVKIT_CONFIG  >  ~/.config/envkit/config.yml

A missing default file means "all defaults". A file that was asked
for explicitly must exist. ``ENVKIT_STATE_FILE`` overrides the
``state_file`` key.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from envkit.core.errors import ConfigError
from envkit.core.models.settings import Settings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ENVKIT_CONFIG"
STATE_FILE_ENV_VAR = "ENVKIT_STATE_FILE"

# Default config location (relative to the user's home directory)
DEFAULT_CONFIG_FILE = Path(".config") / "envkit" / "config.yml"


def default_config_path(home: Path | None = None) -> Path:
    """Get the default config file path for a user."""
    return (home or Path.home()) / DEFAULT_CONFIG_FILE


def find_config_file(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> tuple[Path | None, bool]:
    """Pick the config file to read.

    Returns:
        ``(path, explicit)``. ``explicit`` is True when the path came
        from the caller or the environment and therefore must exist.
    """
    env = os.environ if environ is None else environ
    if path is not None:
        return path, True
    if env.get(CONFIG_ENV_VAR):
        return Path(env[CONFIG_ENV_VAR]), True
    return default_config_path(), False


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load and validate envkit configuration.

    Raises:
        ConfigError: an explicit file is missing, or any file is invalid.
    """
    env = os.environ if environ is None else environ
    config_path, explicit = find_config_file(path, env)

    data: dict = {}
    if config_path is not None and config_path.is_file():
        data = _read_yaml(config_path)
    elif explicit:
        raise ConfigError(f"Config file not found: {config_path}")
    else:
        logger.debug("No config at %s — using defaults", config_path)

    if env.get(STATE_FILE_ENV_VAR):
        data["state_file"] = env[STATE_FILE_ENV_VAR]

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid envkit configuration: {e}") from e

    logger.debug("State file: %s", settings.state_file)
    return settings


def _read_yaml(path: Path) -> dict:
    logger.debug("Loading envkit config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data
