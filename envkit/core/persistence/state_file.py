"""
Shell-environment state — the append-only file of ``export`` lines.

The file lives at ``~/.envkit/shellenv`` by default and is meant to
be sourced by the user's shell and by every command the executor
runs. It is created (with its directory) on first write and only
ever appended to: no dedup, no rewrite, no locking. When the same
key is exported twice, the last line wins at source time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from envkit.core.errors import FileWriteError

logger = logging.getLogger(__name__)

# Default state file path (relative to the user's home directory)
DEFAULT_STATE_DIR = ".envkit"
DEFAULT_STATE_FILE = "shellenv"


def default_state_path(home: Path | None = None) -> Path:
    """Get the default state file path for a user."""
    return (home or Path.home()) / DEFAULT_STATE_DIR / DEFAULT_STATE_FILE


def render_delta(paths: Iterable[str], env: Mapping[str, str]) -> list[str]:
    """Build the export lines for one plan.

    A single PATH line comes first (highest-priority entry first,
    existing PATH last), then one line per env entry in order.
    Values are written verbatim inside double quotes so ``$HOME``
    and friends expand when the file is sourced.
    """
    lines: list[str] = []
    path_list = list(paths)
    if path_list:
        lines.append(f'export PATH="{":".join(path_list)}:$PATH"')
    for key, value in env.items():
        lines.append(f'export {key}="{value}"')
    return lines


class ShellStateFile:
    """Handle on the persisted state file."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> str:
        """Current contents, or an empty string if never written."""
        if not self._path.is_file():
            return ""
        return self._path.read_text(encoding="utf-8")

    def append(self, lines: Iterable[str]) -> int:
        """Append lines to the file, creating it if needed.

        Returns:
            Number of lines appended (0 means the file was not touched).

        Raises:
            FileWriteError: The directory or file could not be written.
        """
        lines = list(lines)
        if not lines:
            return 0

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write("".join(f"{line}\n" for line in lines))
        except OSError as e:
            raise FileWriteError(str(self._path), str(e)) from e

        logger.debug("Appended %d line(s) to %s", len(lines), self._path)
        return len(lines)

    def __repr__(self) -> str:
        return f"<ShellStateFile path={str(self._path)!r}>"
