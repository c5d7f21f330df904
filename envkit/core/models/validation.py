"""
Schema gate — turn raw values into validated models or fail loudly.

pydantic errors are wrapped into :class:`envkit.core.errors.ValidationError`
naming the first offending field, so callers only ever see the envkit
taxonomy.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pydantic

from envkit.core.errors import ValidationError
from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan
from envkit.core.models.recipe_document import RecipeDocument


def wrap_validation_error(exc: pydantic.ValidationError, what: str) -> ValidationError:
    """Convert a pydantic error into the envkit taxonomy."""
    errors = exc.errors(include_url=False)
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()))
    detail = first.get("msg", str(exc))
    if field:
        message = f"Invalid {what}: field '{field}': {detail}"
    else:
        message = f"Invalid {what}: {detail}"
    return ValidationError(message, field=field, errors=errors)


def validate_plan(value: Any) -> ExecutionPlan:
    """Final, mandatory schema check on a recipe's output.

    Accepts an :class:`ExecutionPlan` (already validated on construction)
    or a mapping in the plan's wire shape.
    """
    if isinstance(value, ExecutionPlan):
        return value
    if not isinstance(value, Mapping):
        raise ValidationError(
            f"Invalid execution plan: expected a mapping, got {type(value).__name__}"
        )
    try:
        return ExecutionPlan.model_validate(dict(value))
    except pydantic.ValidationError as e:
        raise wrap_validation_error(e, "execution plan") from e


def build_context(**fields: Any) -> UseContext:
    """Validate CLI input into a :class:`UseContext`.

    ``None`` values are dropped so model defaults apply.
    """
    data = {k: v for k, v in fields.items() if v is not None}
    try:
        return UseContext.model_validate(data)
    except pydantic.ValidationError as e:
        raise wrap_validation_error(e, "context") from e


def validate_document(value: Any) -> RecipeDocument:
    """Validate a declarative recipe document."""
    if not isinstance(value, Mapping):
        raise ValidationError(
            f"Invalid recipe document: expected a mapping, got {type(value).__name__}"
        )
    try:
        return RecipeDocument.model_validate(dict(value))
    except pydantic.ValidationError as e:
        raise wrap_validation_error(e, "recipe document") from e
