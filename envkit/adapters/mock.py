"""
Mock capabilities — test doubles for runner and probe.

Used to assert exact invocation sequences without touching a real
shell. By default every command succeeds; individual commands can
be configured to fail.
"""

from __future__ import annotations

from collections.abc import Sequence

from envkit.adapters.base import CommandResult, CommandRunner, Probe


class MockCommandRunner(CommandRunner):
    """Records every command and returns configured exit codes."""

    def __init__(self, default_exit_code: int = 0, runner_name: str = "mock"):
        self._name = runner_name
        self._default_exit_code = default_exit_code
        self._exit_codes: dict[str, int] = {}
        self._call_log: list[tuple[str, bool]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[str, bool]]:
        """``(command, capture)`` for every call, in order."""
        return self._call_log

    @property
    def commands(self) -> list[str]:
        """Just the command strings, in call order."""
        return [command for command, _ in self._call_log]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_exit_code(self, command: str, exit_code: int) -> None:
        """Make a specific command exit with ``exit_code``."""
        self._exit_codes[command] = exit_code

    def run(self, command: str, *, capture: bool = False) -> CommandResult:
        self._call_log.append((command, capture))
        code = self._exit_codes.get(command, self._default_exit_code)
        return CommandResult(command=command, exit_code=code)

    def reset(self) -> None:
        """Clear call log and configured exit codes."""
        self._call_log.clear()
        self._exit_codes.clear()


class MockProbe(Probe):
    """Answers queries from canned responses; unknown queries yield None."""

    def __init__(
        self,
        responses: dict[tuple[str, ...], str] | None = None,
        binaries: dict[str, str] | None = None,
    ):
        self._responses = dict(responses or {})
        self._binaries = dict(binaries or {})
        self.queries: list[tuple[str, ...]] = []

    def set_response(self, argv: Sequence[str], output: str) -> None:
        self._responses[tuple(argv)] = output

    def query(self, argv: Sequence[str]) -> str | None:
        key = tuple(argv)
        self.queries.append(key)
        return self._responses.get(key)

    def which(self, binary: str) -> str | None:
        return self._binaries.get(binary)
