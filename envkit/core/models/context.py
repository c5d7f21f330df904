"""
Use context — the user's intent for one resolution.

The target runtime gets the caller's full context. Every transitive
dependency gets its own neutral context (see ``for_dependency``),
so a context is never shared between two recipe names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UseContext(BaseModel):
    """Validated, immutable intent passed to ``Recipe.resolve``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    runtime: str = Field(min_length=1)
    version: str = "latest"
    preset: str | None = None
    dry_run: bool = Field(default=False, alias="dryRun")
    options: dict[str, str | bool] = Field(default_factory=dict)

    @classmethod
    def for_dependency(cls, name: str, dry_run: bool = False) -> UseContext:
        """Neutral context for a pure dependency: its own name and dry_run only."""
        return cls(runtime=name, dry_run=dry_run)
