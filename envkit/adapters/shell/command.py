"""
Shell command runner — execute install commands through ``sh``.

This is the SINGLE PLACE where install-phase commands are spawned.
Every command is prefixed with a guarded ``.`` of the persisted
shell-environment state, so PATH and exports written by earlier
plans are visible.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from pathlib import Path

from envkit.adapters.base import CommandResult, CommandRunner

logger = logging.getLogger(__name__)


def source_prelude(state_file: Path | None) -> str:
    """Shell snippet that sources the state file if it exists.

    ``.`` on a missing file aborts a non-interactive POSIX shell, so
    the existence test is required.
    """
    if state_file is None:
        return ""
    quoted = shlex.quote(str(state_file))
    return f"if [ -f {quoted} ]; then . {quoted}; fi\n"


class ShellCommandRunner(CommandRunner):
    """Run commands with ``sh -c`` after sourcing the state file.

    No timeout is applied: long readiness waits are bounded loops
    inside the recipes themselves.
    """

    def __init__(self, state_file: Path | None = None, shell: str = "/bin/sh"):
        self._state_file = state_file
        self._shell = shell

    @property
    def name(self) -> str:
        return "shell"

    def build_script(self, command: str) -> str:
        """The full script passed to the shell for ``command``."""
        return source_prelude(self._state_file) + command

    def run(self, command: str, *, capture: bool = False) -> CommandResult:
        script = self.build_script(command)
        logger.debug("Executing: %s (capture=%s)", command, capture)
        start = time.monotonic()

        try:
            result = subprocess.run(
                [self._shell, "-c", script],
                capture_output=capture,
                text=True,
            )
        except OSError as e:
            logger.error("Cannot spawn %s: %s", self._shell, e)
            return CommandResult(command=command, exit_code=127, stderr=str(e))

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, command)
        return CommandResult(
            command=command,
            exit_code=result.returncode,
            stdout=(result.stdout or "") if capture else "",
            stderr=(result.stderr or "") if capture else "",
            duration_ms=elapsed_ms,
        )
