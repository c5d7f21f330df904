"""
Logging configuration — central setup for the CLI.

Called once at startup by main.py. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  ENVKIT_LOG_LEVEL env var  >  WARNING (default)

Optional file output via ENVKIT_LOG_FILE / ENVKIT_LOG_FILE_LEVEL.
Progress meant for the user goes through ``click.echo``, not here.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV_VAR = "ENVKIT_LOG_LEVEL"
LOG_FILE_ENV_VAR = "ENVKIT_LOG_FILE"
LOG_FILE_LEVEL_ENV_VAR = "ENVKIT_LOG_FILE_LEVEL"

# WARNING and above — just the message
_FMT_MINIMAL = "%(message)s"

# INFO — timestamped with logger name
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG and file output — file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(LOG_LEVEL_ENV_VAR, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install envkit's handlers on the root logger.

    Safe to call more than once: previous handlers are replaced, so
    repeated CLI invocations in one process (tests) do not stack.

    Args:
        level: Console level name. Unknown names mean WARNING.
        log_file: Also log to this file (always in the DEBUG format).
        log_file_level: Level for the file; defaults to ``level``.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level or level)
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)
    # the root passes everything any handler wants
    root.setLevel(min(h.level for h in handlers))


def _console_handler(level: int) -> logging.Handler:
    if level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_SHORT)
    elif level <= logging.INFO:
        formatter = logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT_SHORT)
    else:
        formatter = logging.Formatter(_FMT_MINIMAL)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_FILE))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; anything unrecognised is WARNING."""
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
