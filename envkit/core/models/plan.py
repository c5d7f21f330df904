"""
Execution plan model — what a recipe asks the executor to do.

A plan is ephemeral: produced once per ``Recipe.resolve`` call and
consumed immediately by the executor. Nothing here is cached or
persisted.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_ENV_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_env_keys(env: dict[str, str]) -> dict[str, str]:
    """Reject env keys that cannot appear in an ``export KEY=...`` line."""
    for key in env:
        if not _ENV_KEY.match(key):
            raise ValueError(f"'{key}' is not a valid environment variable name")
    return env


class InstallStep(BaseModel):
    """One unit of plan execution: an optional probe plus an action.

    If ``check_cmd`` exits 0 the step is already applied and ``cmd``
    is skipped.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)        # unique within a plan, for diagnostics
    label: str = Field(min_length=1)     # human-readable
    cmd: str = Field(min_length=1)
    check_cmd: str | None = Field(default=None, alias="checkCmd")


class PlanFile(BaseModel):
    """A file the executor writes verbatim after all steps finish."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1)
    content: str


class ExecutionPlan(BaseModel):
    """The validated output of a recipe's resolution.

    ``paths`` are in priority order: the first entry ends up first
    on ``PATH``. ``env`` keeps insertion order, which is the order
    the export lines are written in.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    install_steps: list[InstallStep] = Field(alias="installSteps")
    env: dict[str, str]
    paths: list[str]
    files: list[PlanFile] = Field(default_factory=list)

    @field_validator("env")
    @classmethod
    def _env_keys(cls, value: dict[str, str]) -> dict[str, str]:
        return check_env_keys(value)

    @property
    def is_empty(self) -> bool:
        """Whether executing this plan would do nothing at all."""
        return not (self.install_steps or self.env or self.paths or self.files)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
