"""
Error taxonomy — every failure that aborts a ``use`` invocation.

All errors derive from :class:`EnvkitError` and carry a ``category``
that the CLI prints next to the message. A failing ``checkCmd`` is
NOT an error and never appears here.
"""

from __future__ import annotations


class EnvkitError(Exception):
    """Base class for all envkit errors."""

    category = "Error"


class ConfigError(EnvkitError):
    """Raised when the envkit configuration is invalid or unreadable."""

    category = "ConfigError"


class ValidationError(EnvkitError):
    """A context, plan, or recipe document failed its schema.

    ``field`` is the dotted path of the first offending field
    (e.g. ``installSteps.0.cmd``), or ``""`` when the whole value
    is the wrong shape.
    """

    category = "ValidationError"

    def __init__(self, message: str, field: str = "", errors: list[dict] | None = None):
        super().__init__(message)
        self.field = field
        self.errors = errors or []


class CircularDependencyError(EnvkitError):
    """The ``depends`` graph reachable from the target contains a cycle."""

    category = "CircularDependencyError"

    def __init__(self, chain: list[str]):
        self.chain = list(chain)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.chain)}")


class MissingDependencyError(EnvkitError):
    """A recipe depends on a name that is not in the registry."""

    category = "MissingDependencyError"

    def __init__(self, source: str, missing: str):
        self.source = source
        self.missing = missing
        super().__init__(f"Recipe '{source}' depends on missing recipe '{missing}'")


class TargetNotFoundError(EnvkitError):
    """The requested runtime itself is not in the registry."""

    category = "TargetNotFoundError"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Recipe for '{name}' not found")


class TemplateSubstitutionError(EnvkitError):
    """A declarative recipe references a ``{{var}}`` with no value."""

    category = "TemplateSubstitutionError"

    def __init__(self, variable: str, hint: str = ""):
        self.variable = variable
        message = f"Missing required variable: {{{{{variable}}}}}."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class CommandExecutionError(EnvkitError):
    """An install command exited non-zero; the plan was aborted."""

    category = "CommandExecutionError"

    def __init__(self, step_id: str, command: str, exit_code: int):
        self.step_id = step_id
        self.command = command
        self.exit_code = exit_code
        super().__init__(
            f"Command failed (exit {exit_code}) in step '{step_id}': {command}"
        )


class UnsupportedPlatformError(EnvkitError):
    """A recipe has no branch for the current operating system."""

    category = "UnsupportedPlatformError"

    def __init__(self, recipe: str, platform: str):
        self.recipe = recipe
        self.platform = platform
        super().__init__(f"Unsupported platform for '{recipe}': {platform}")


class FileWriteError(EnvkitError):
    """A plan file or the state file could not be written."""

    category = "FileWriteError"

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cannot write {path}: {reason}")
