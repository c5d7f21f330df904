"""
Shared test fixtures and configuration.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from envkit.adapters.mock import MockCommandRunner
from envkit.core.persistence.state_file import ShellStateFile
from envkit.core.registry import Registry
from tests.stubs import StubRecipe


@pytest.fixture
def make_registry() -> Callable[..., Registry]:
    """Build a registry of stub recipes from ``name -> depends`` pairs."""

    def _make(graph: dict[str, tuple[str, ...]]) -> Registry:
        return Registry(StubRecipe(name, depends) for name, depends in graph.items())

    return _make


@pytest.fixture
def mock_runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Location of a not-yet-created state file."""
    return tmp_path / "home" / ".envkit" / "shellenv"


@pytest.fixture
def state_file(state_path: Path) -> ShellStateFile:
    return ShellStateFile(state_path)
