"""
Use case — provision a runtime and everything it depends on.

    context → resolve order → per name: scoped context → recipe.resolve
            → validate_plan → executor.execute

Any envkit error aborts the whole invocation. Plans that already ran
stay applied; there is no rollback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import pydantic

from envkit.core.engine.executor import ExecutionReport, PlanExecutor
from envkit.core.engine.resolver import resolve_dependencies
from envkit.core.models.context import UseContext
from envkit.core.models.validation import validate_plan, wrap_validation_error
from envkit.core.recipe import Recipe

logger = logging.getLogger(__name__)


@dataclass
class UseResult:
    """Result of provisioning one runtime."""

    runtime: str = ""
    dry_run: bool = False
    chain: list[str] = field(default_factory=list)
    reports: list[ExecutionReport] = field(default_factory=list)

    @property
    def executed(self) -> int:
        return sum(r.executed for r in self.reports)

    @property
    def skipped(self) -> int:
        return sum(r.skipped for r in self.reports)

    def to_dict(self) -> dict:
        return {
            "runtime": self.runtime,
            "dry_run": self.dry_run,
            "chain": list(self.chain),
            "executed": self.executed,
            "skipped": self.skipped,
            "reports": [r.to_dict() for r in self.reports],
        }


def context_for(name: str, context: UseContext) -> UseContext:
    """The context a resolved name receives.

    The target gets the caller's full context; each pure dependency
    gets a fresh neutral one carrying only its name and ``dry_run``.
    """
    if name == context.runtime:
        return context
    return UseContext.for_dependency(name, dry_run=context.dry_run)


def use_runtime(
    context: UseContext,
    registry: Mapping[str, Recipe],
    executor: PlanExecutor,
    echo: Callable[[str], None] | None = None,
) -> UseResult:
    """Resolve ``context.runtime`` and execute each plan in order.

    ``echo`` receives the dependency chain when there is more than one
    name to provision (default: INFO log).

    Raises:
        EnvkitError: any resolution, validation, or execution failure.
    """
    chain = resolve_dependencies(context.runtime, registry)
    if len(chain) > 1:
        message = f"Resolved dependency chain: {' -> '.join(chain)}"
        if echo is not None:
            echo(message)
        else:
            logger.info(message)

    result = UseResult(runtime=context.runtime, dry_run=context.dry_run, chain=chain)

    for name in chain:
        recipe = registry[name]
        logger.info("Resolving plan for %s...", name)
        try:
            raw = recipe.resolve(context_for(name, context))
        except pydantic.ValidationError as e:
            # a recipe that builds its plan model directly fails here
            raise wrap_validation_error(e, f"execution plan for '{name}'") from e
        plan = validate_plan(raw)
        report = executor.execute(plan, dry_run=context.dry_run, label=name)
        result.reports.append(report)

    return result
