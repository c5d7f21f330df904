"""
Domain models — pydantic types for contexts, plans, and recipe documents.

All models are re-exported here for convenient access:

    from envkit.core.models import UseContext, ExecutionPlan, InstallStep
"""

from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep, PlanFile
from envkit.core.models.recipe_document import RecipeDocument
from envkit.core.models.settings import Settings
from envkit.core.models.validation import (
    build_context,
    validate_document,
    validate_plan,
)

__all__ = [
    # plan.py
    "ExecutionPlan",
    "InstallStep",
    "PlanFile",
    # recipe_document.py
    "RecipeDocument",
    # settings.py
    "Settings",
    # context.py
    "UseContext",
    # validation.py
    "build_context",
    "validate_document",
    "validate_plan",
]
