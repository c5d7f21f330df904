"""
Tests for the use and list flows — context scoping, ordering, validation.
"""

import pytest

from envkit.core.engine.executor import PlanExecutor
from envkit.core.errors import TargetNotFoundError, ValidationError
from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan, InstallStep
from envkit.core.registry import Registry
from envkit.core.use_cases.listing import list_recipes
from envkit.core.use_cases.use import context_for, use_runtime

from tests.stubs import StubRecipe


def _step_plan(cmd: str) -> ExecutionPlan:
    return ExecutionPlan(
        install_steps=[InstallStep(id=cmd, label=cmd, cmd=cmd)],
        env={},
        paths=[],
    )


class _Sink:
    def __init__(self):
        self.lines: list[str] = []

    def __call__(self, message: str) -> None:
        self.lines.append(message)


class TestContextFor:
    def test_target_keeps_context(self):
        ctx = UseContext(runtime="laravel", preset="blog", options={"x": True})
        assert context_for("laravel", ctx) is ctx

    def test_dependency_gets_neutral_context(self):
        ctx = UseContext(runtime="laravel", version="11", preset="blog", dry_run=True)
        dep = context_for("php", ctx)
        assert dep.runtime == "php"
        assert dep.version == "latest"
        assert dep.preset is None
        assert dep.dry_run is True


class TestUseRuntime:
    def test_executes_chain_in_order(self, mock_runner, state_file):
        registry = Registry([
            StubRecipe("php", plan=_step_plan("install-php")),
            StubRecipe("php-sqlite", depends=("php",), plan=_step_plan("install-sqlite")),
        ])
        executor = PlanExecutor(mock_runner, state_file, echo=_Sink())

        result = use_runtime(UseContext(runtime="php-sqlite"), registry, executor)

        assert result.chain == ["php", "php-sqlite"]
        assert mock_runner.commands == ["install-php", "install-sqlite"]
        assert result.executed == 2
        assert [r.label for r in result.reports] == ["php", "php-sqlite"]

    def test_dependency_receives_neutral_context(self, mock_runner, state_file):
        php = StubRecipe("php")
        app = StubRecipe("app", depends=("php",))
        executor = PlanExecutor(mock_runner, state_file, echo=_Sink())

        use_runtime(UseContext(runtime="app", preset="blog"), Registry([php, app]), executor)

        assert php.contexts[0].preset is None
        assert php.contexts[0].runtime == "php"
        assert app.contexts[0].preset == "blog"

    def test_chain_echoed(self, mock_runner, state_file):
        registry = Registry([StubRecipe("a", depends=("b",)), StubRecipe("b")])
        sink = _Sink()
        executor = PlanExecutor(mock_runner, state_file, echo=sink)

        use_runtime(UseContext(runtime="a"), registry, executor, echo=sink)

        assert "Resolved dependency chain: b -> a" in sink.lines

    def test_single_recipe_not_echoed(self, mock_runner, state_file):
        sink = _Sink()
        executor = PlanExecutor(mock_runner, state_file, echo=_Sink())
        use_runtime(UseContext(runtime="a"), Registry([StubRecipe("a")]), executor, echo=sink)
        assert sink.lines == []

    def test_invalid_plan_aborts_before_execution(self, mock_runner, state_file):
        registry = Registry([
            StubRecipe("ok", plan=_step_plan("first")),
            StubRecipe("bad", depends=("ok",), plan={"installSteps": [{"id": "x"}], "env": {}, "paths": []}),
        ])
        executor = PlanExecutor(mock_runner, state_file, echo=_Sink())

        with pytest.raises(ValidationError):
            use_runtime(UseContext(runtime="bad"), registry, executor)

        # the dependency already ran; there is no rollback
        assert mock_runner.commands == ["first"]

    def test_model_error_inside_resolve_is_wrapped(self, mock_runner, state_file):
        class BrokenRecipe(StubRecipe):
            def resolve(self, context):
                return ExecutionPlan(install_steps=[], env={"BAD KEY": "x"}, paths=[])

        executor = PlanExecutor(mock_runner, state_file, echo=_Sink())
        with pytest.raises(ValidationError) as exc:
            use_runtime(UseContext(runtime="broken"), Registry([BrokenRecipe("broken")]), executor)
        assert "broken" in str(exc.value)

    def test_unknown_target(self, mock_runner, state_file):
        executor = PlanExecutor(mock_runner, state_file, echo=_Sink())
        with pytest.raises(TargetNotFoundError):
            use_runtime(UseContext(runtime="nope"), Registry([]), executor)

    def test_dry_run_propagates(self, mock_runner, state_file):
        registry = Registry([
            StubRecipe("php", plan=_step_plan("install-php")),
            StubRecipe("app", depends=("php",), plan=_step_plan("install-app")),
        ])
        executor = PlanExecutor(mock_runner, state_file, echo=_Sink())

        result = use_runtime(UseContext(runtime="app", dry_run=True), registry, executor)

        assert mock_runner.call_count == 0
        assert all(r.dry_run for r in result.reports)
        assert result.to_dict()["chain"] == ["php", "app"]


class TestListRecipes:
    def test_lists_without_resolving(self):
        recipes = [StubRecipe("b", depends=("a",)), StubRecipe("a")]
        result = list_recipes(Registry(recipes))

        assert result.count == 2
        assert [r["name"] for r in result.recipes] == ["a", "b"]
        assert result.recipes[1]["depends"] == ["a"]
        assert all(r.contexts == [] for r in recipes)
