"""
Adapter base — the capability contracts between the engine and the host.

The engine never spawns processes or touches the filesystem directly.
It talks to three capabilities:

    CommandRunner   install-phase commands (checkCmd / cmd)
    Probe           read-only discovery during ``Recipe.resolve``
    FileWriter      files declared by a plan

Real implementations live in ``envkit.adapters.shell``; test doubles
live in ``envkit.adapters.mock``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command. Runners return this, they never raise."""

    command: str
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command exited 0."""
        return self.exit_code == 0


class CommandRunner(ABC):
    """Runs install-phase shell commands.

    Implementations source the persisted shell-environment state
    before every command so earlier plans are visible to later ones.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def run(self, command: str, *, capture: bool = False) -> CommandResult:
        """Run ``command`` and block until it exits.

        Args:
            command: Shell command line.
            capture: Capture output instead of passing it through to
                the terminal. Used for ``checkCmd`` probes.

        MUST never raise for a failing command; failures are exit codes.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class Probe(ABC):
    """Read-only discovery of host state (install prefixes, binaries).

    A probe only ever returns text. It has no access to the persisted
    state and no way to pass output through, so it cannot be used to
    install anything.
    """

    @abstractmethod
    def query(self, argv: Sequence[str]) -> str | None:
        """Run a query command; stripped stdout on exit 0, else None."""

    @abstractmethod
    def which(self, binary: str) -> str | None:
        """Absolute path of ``binary`` on PATH, or None."""

    def brew_prefix(self, formula: str) -> str | None:
        """Where Homebrew has (or would have) installed ``formula``."""
        return self.query(["brew", "--prefix", formula])


class FileWriter(ABC):
    """Writes plan-declared files."""

    @abstractmethod
    def write(self, path: Path, content: str) -> None:
        """Create missing parent directories, then write ``content`` verbatim.

        Raises OSError on failure; the executor wraps it.
        """
