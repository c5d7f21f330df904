"""
Settings model — user configuration for envkit itself.

Loaded from ``~/.config/envkit/config.yml`` (or an explicit path).
Every field has a default, so an absent file is a valid config.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from envkit.core.persistence.state_file import default_state_path


def expand_path(value: Any) -> Any:
    """Expand ``~`` and ``$VARS`` in a path-like string."""
    if isinstance(value, (str, Path)):
        return Path(os.path.expandvars(os.path.expanduser(str(value))))
    return value


class Settings(BaseModel):
    """envkit configuration."""

    model_config = ConfigDict(extra="forbid")

    state_file: Path = Field(default_factory=default_state_path)
    recipe_dirs: list[Path] = Field(default_factory=list)

    @field_validator("state_file", mode="before")
    @classmethod
    def _expand_state_file(cls, value: Any) -> Any:
        return expand_path(value)

    @field_validator("recipe_dirs", mode="before")
    @classmethod
    def _expand_recipe_dirs(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [expand_path(v) for v in value]
        return value
