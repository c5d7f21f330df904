"""
Tests for adapters — shell runner, system probe, file writer, and mocks.
"""

from pathlib import Path

from envkit.adapters.base import CommandResult
from envkit.adapters.mock import MockCommandRunner, MockProbe
from envkit.adapters.shell.command import ShellCommandRunner
from envkit.adapters.shell.filesystem import LocalFileWriter
from envkit.adapters.shell.probe import SystemProbe


class TestCommandResult:
    def test_ok(self):
        assert CommandResult(command="true", exit_code=0).ok
        assert not CommandResult(command="false", exit_code=1).ok


class TestShellCommandRunner:
    def test_exit_codes(self):
        runner = ShellCommandRunner()
        assert runner.run("exit 0").exit_code == 0
        assert runner.run("exit 7").exit_code == 7

    def test_capture(self):
        result = ShellCommandRunner().run("echo hello", capture=True)
        assert result.stdout.strip() == "hello"

    def test_script_sources_state(self, tmp_path: Path):
        state = tmp_path / "shellenv"
        script = ShellCommandRunner(state).build_script("echo hi")
        assert f". {state}" in script
        assert script.endswith("echo hi")

    def test_missing_shell(self, tmp_path: Path):
        result = ShellCommandRunner(shell=str(tmp_path / "no-such-shell")).run("true")
        assert result.exit_code == 127


class TestSystemProbe:
    def test_missing_binary(self):
        assert SystemProbe().query(["envkit-no-such-binary", "--prefix"]) is None

    def test_output_stripped(self):
        assert SystemProbe().query(["echo", "  /opt/x  "]) == "/opt/x"

    def test_failure_is_none(self):
        assert SystemProbe().query(["false"]) is None

    def test_empty_output_is_none(self):
        assert SystemProbe().query(["true"]) is None

    def test_brew_prefix_without_brew(self, monkeypatch):
        monkeypatch.setenv("PATH", "")
        assert SystemProbe().brew_prefix("php") is None


class TestLocalFileWriter:
    def test_exact_content(self, tmp_path: Path):
        target = tmp_path / "a" / "b.txt"
        LocalFileWriter().write(target, "line1\r\nline2\n")
        assert target.read_bytes() == b"line1\r\nline2\n"


class TestMocks:
    def test_runner_records_and_resets(self):
        runner = MockCommandRunner()
        runner.set_exit_code("bad", 2)
        assert runner.run("good").ok
        assert runner.run("bad", capture=True).exit_code == 2
        assert runner.call_log == [("good", False), ("bad", True)]

        runner.reset()
        assert runner.call_count == 0
        assert runner.run("bad").ok

    def test_probe_responses(self):
        probe = MockProbe({("brew", "--prefix", "php"): "/opt/php"})
        assert probe.brew_prefix("php") == "/opt/php"
        assert probe.query(["brew", "--prefix", "ruby"]) is None
        assert probe.queries == [("brew", "--prefix", "php"), ("brew", "--prefix", "ruby")]
