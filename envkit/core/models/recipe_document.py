"""
Recipe document model — the static data format for declarative recipes.

Documents are YAML or JSON files. Step fields may contain
``{{preset}}`` placeholders; ``env``, ``paths`` and ``files`` are
passed through verbatim.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from envkit.core.models.plan import InstallStep, PlanFile, check_env_keys


class RecipeDocument(BaseModel):
    """A declarative recipe as loaded from disk."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    description: str
    default_preset: str | None = Field(default=None, alias="defaultPreset")
    depends: list[str] = Field(default_factory=list)
    verify: str | None = None

    install_steps: list[InstallStep] = Field(alias="installSteps")
    env: dict[str, str] = Field(default_factory=dict)
    paths: list[str] = Field(default_factory=list)
    files: list[PlanFile] = Field(default_factory=list)

    @field_validator("env")
    @classmethod
    def _env_keys(cls, value: dict[str, str]) -> dict[str, str]:
        return check_env_keys(value)
