"""
Plan executor — runs (or simulates) one execution plan.

Flow per plan:
    steps (in order, check → cmd, fail fast) → files (concurrent) → env delta (append)

Dry-run walks exactly the same sequence but only renders it: no
subprocess, no file write, no append.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from envkit.adapters.base import CommandRunner, FileWriter
from envkit.adapters.shell.filesystem import LocalFileWriter
from envkit.core.errors import CommandExecutionError, FileWriteError
from envkit.core.models.plan import ExecutionPlan, InstallStep, PlanFile
from envkit.core.persistence.state_file import ShellStateFile, render_delta

logger = logging.getLogger(__name__)

Echo = Callable[[str], None]


@dataclass
class StepReceipt:
    """What happened to one install step."""

    id: str
    label: str
    status: Literal["ok", "skipped", "planned"] = "ok"
    duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "status": self.status,
            "duration_ms": self.duration_ms,
        }


@dataclass
class ExecutionReport:
    """Result of executing (or dry-running) one plan."""

    label: str = ""
    dry_run: bool = False
    steps: list[StepReceipt] = field(default_factory=list)
    files_written: list[str] = field(default_factory=list)
    state_lines: list[str] = field(default_factory=list)
    rendered: list[str] = field(default_factory=list)

    @property
    def executed(self) -> int:
        return sum(1 for s in self.steps if s.status == "ok")

    @property
    def skipped(self) -> int:
        return sum(1 for s in self.steps if s.status == "skipped")

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "label": self.label,
            "dry_run": self.dry_run,
            "executed": self.executed,
            "skipped": self.skipped,
            "steps": [s.to_dict() for s in self.steps],
            "files_written": list(self.files_written),
            "state_lines": list(self.state_lines),
        }
        if self.dry_run:
            result["rendered"] = list(self.rendered)
        return result


def _log_echo(message: str) -> None:
    logger.info(message)


class PlanExecutor:
    """Executes plans through a command runner and a file writer.

    Args:
        runner: Runs ``checkCmd`` / ``cmd``. Sources the state file itself.
        state: The persisted shell-environment state.
        writer: Writes plan files (default: local filesystem).
        echo: Sink for progress and dry-run lines (default: INFO log).
        max_workers: Upper bound on concurrent file writes.
    """

    def __init__(
        self,
        runner: CommandRunner,
        state: ShellStateFile,
        writer: FileWriter | None = None,
        echo: Echo | None = None,
        max_workers: int = 4,
    ):
        self._runner = runner
        self._state = state
        self._writer = writer or LocalFileWriter()
        self._echo = echo or _log_echo
        self._max_workers = max(1, max_workers)

    @property
    def state(self) -> ShellStateFile:
        return self._state

    def execute(
        self,
        plan: ExecutionPlan,
        dry_run: bool = False,
        label: str | None = None,
    ) -> ExecutionReport:
        """Run every step, write every file, then persist the env delta.

        Raises:
            CommandExecutionError: a ``cmd`` exited non-zero. Later steps,
                files, and the env delta are not applied.
            FileWriteError: a declared file could not be written. The env
                delta is not applied.
        """
        report = ExecutionReport(label=label or "", dry_run=dry_run)
        delta = render_delta(plan.paths, plan.env)

        if dry_run:
            self._render_dry_run(plan, delta, report)
            return report

        if label:
            self._echo(f"==> {label}")
        logger.debug("Executing plan %r: %d step(s)", label, len(plan.install_steps))

        for step in plan.install_steps:
            report.steps.append(self._run_step(step))

        report.files_written = self._write_files(plan.files)

        if delta:
            self._state.append(delta)
            report.state_lines = delta
            self._echo(f"Updated {self._state.path}")

        return report

    # ── Steps ───────────────────────────────────────────────────

    def _run_step(self, step: InstallStep) -> StepReceipt:
        self._echo(f"[{step.id}] {step.label}...")
        start = time.monotonic()

        if step.check_cmd:
            check = self._runner.run(step.check_cmd, capture=True)
            if check.ok:
                self._echo("  -> Skipped (check passed)")
                return StepReceipt(id=step.id, label=step.label, status="skipped")
            logger.debug("Check failed for %s (exit %d)", step.id, check.exit_code)

        result = self._runner.run(step.cmd)
        if not result.ok:
            logger.error("Step %s failed with exit %d", step.id, result.exit_code)
            raise CommandExecutionError(step.id, step.cmd, result.exit_code)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        self._echo("  -> Done")
        return StepReceipt(id=step.id, label=step.label, status="ok", duration_ms=elapsed_ms)

    # ── Files ───────────────────────────────────────────────────

    def _write_files(self, files: list[PlanFile]) -> list[str]:
        """Write all files concurrently; report in declared order."""
        if not files:
            return []

        targets = [(Path(f.path).expanduser(), f.content) for f in files]
        workers = min(self._max_workers, len(targets))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                (path, pool.submit(self._writer.write, path, content))
                for path, content in targets
            ]

        written: list[str] = []
        failures: list[tuple[Path, OSError]] = []
        for path, future in futures:
            try:
                future.result()
            except OSError as e:
                failures.append((path, e))
                continue
            written.append(str(path))
            self._echo(f"[File] Wrote {path}")

        if failures:
            path, error = failures[0]
            for other, other_error in failures[1:]:
                logger.error("Cannot write %s: %s", other, other_error)
            raise FileWriteError(str(path), str(error)) from error

        return written

    # ── Dry run ─────────────────────────────────────────────────

    def _render_dry_run(
        self,
        plan: ExecutionPlan,
        delta: list[str],
        report: ExecutionReport,
    ) -> None:
        lines: list[str] = []
        header = "--- DRY RUN: Execution Plan"
        lines.append(f"{header} ({report.label}) ---" if report.label else f"{header} ---")

        for step in plan.install_steps:
            lines.append(f"[Step: {step.id}] {step.label}")
            if step.check_cmd:
                lines.append(f"  CHECK: {step.check_cmd}")
            lines.append(f"  CMD:   {step.cmd}")
            report.steps.append(StepReceipt(id=step.id, label=step.label, status="planned"))

        for f in plan.files:
            lines.append(f"[File] Write to {f.path}:")
            lines.append(f.content)

        if delta:
            lines.append(f"[State] Append to {self._state.path}:")
            lines.extend(delta)

        for line in lines:
            self._echo(line)
        report.rendered = lines
