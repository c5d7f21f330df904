"""
Tests for built-in recipes and registry assembly.
"""

from pathlib import Path

import pytest

from envkit.adapters.mock import MockProbe
from envkit.adapters.platform import Platform, detect_platform
from envkit.core.engine.resolver import resolve_dependencies
from envkit.core.errors import UnsupportedPlatformError
from envkit.core.models.context import UseContext
from envkit.core.models.plan import ExecutionPlan
from envkit.core.registry import Registry
from envkit.recipes import PLATFORM_RECIPES, builtin_registry
from envkit.recipes.postgres import PostgresRecipe
from envkit.recipes.redis import RedisRecipe
from envkit.recipes.wordpress import WordpressRecipe

BUILTIN_NAMES = [
    "dart",
    "deno",
    "laravel",
    "mysql",
    "nginx",
    "ollama",
    "php",
    "php-fpm",
    "php-sqlite",
    "postgres",
    "redis",
    "ruby",
    "wordpress",
]


@pytest.fixture
def probe() -> MockProbe:
    return MockProbe()


class TestDetectPlatform:
    def test_known(self):
        assert detect_platform("Darwin") is Platform.DARWIN
        assert detect_platform("Linux") is Platform.LINUX

    def test_unknown(self):
        assert detect_platform("Windows") is Platform.UNSUPPORTED


class TestBuiltinRegistry:
    def test_names(self, probe):
        registry = builtin_registry(Platform.LINUX, probe)
        assert registry.names() == BUILTIN_NAMES

    def test_dependencies_declared(self, probe):
        registry = builtin_registry(Platform.LINUX, probe)
        assert registry["php-sqlite"].depends == ("php",)
        assert registry["php-fpm"].depends == ("php",)
        assert registry["laravel"].depends == ("php",)

    @pytest.mark.parametrize("platform", [Platform.DARWIN, Platform.LINUX])
    @pytest.mark.parametrize("name", BUILTIN_NAMES)
    def test_every_recipe_resolves(self, platform, name, probe):
        registry = builtin_registry(platform, probe)
        plan = registry[name].resolve(UseContext(runtime=name))
        assert isinstance(plan, ExecutionPlan)

    def test_extra_dir_overrides_builtin(self, tmp_path: Path, probe):
        (tmp_path / "redis.yml").write_text(
            "name: redis\ndescription: Custom redis\ninstallSteps: []\n"
        )
        registry = builtin_registry(Platform.LINUX, probe, extra_dirs=[tmp_path])
        assert registry["redis"].description == "Custom redis"

    def test_extra_dir_adds_recipe(self, tmp_path: Path, probe):
        (tmp_path / "tool.yml").write_text(
            "name: tool\ndescription: Tool\ndepends: [php]\ninstallSteps: []\n"
        )
        registry = builtin_registry(Platform.LINUX, probe, extra_dirs=[tmp_path])
        assert "tool" in registry
        assert len(registry) == len(BUILTIN_NAMES) + 1

    def test_describe_never_resolves(self, probe):
        registry = builtin_registry(Platform.DARWIN, probe)
        entries = registry.describe()
        assert [e["name"] for e in entries] == BUILTIN_NAMES
        assert probe.queries == []


class TestRegistry:
    def test_immutable(self, probe):
        registry = Registry([RedisRecipe(Platform.LINUX, probe)])
        with pytest.raises(TypeError):
            registry["redis"] = RedisRecipe(Platform.LINUX, probe)

    def test_merged_returns_new_registry(self, probe):
        base = Registry([RedisRecipe(Platform.LINUX, probe)])
        merged = base.merged([PostgresRecipe(Platform.LINUX, probe)])
        assert "postgres" not in base
        assert merged.names() == ["postgres", "redis"]

    def test_nameless_recipe_rejected(self, probe):
        recipe = RedisRecipe(Platform.LINUX, probe)
        recipe.name = ""
        with pytest.raises(ValueError):
            Registry([recipe])


class TestPlatformBranches:
    @pytest.mark.parametrize("cls", PLATFORM_RECIPES)
    def test_unsupported_platform(self, cls, probe):
        recipe = cls(Platform.UNSUPPORTED, probe)
        with pytest.raises(UnsupportedPlatformError) as exc:
            recipe.resolve(UseContext(runtime=recipe.name))
        assert exc.value.recipe == recipe.name

    def test_darwin_uses_probed_prefix(self):
        probe = MockProbe({("brew", "--prefix", "ruby"): "/opt/homebrew/opt/ruby"})
        registry = builtin_registry(Platform.DARWIN, probe)
        plan = registry["ruby"].resolve(UseContext(runtime="ruby"))
        assert plan.paths[0] == "/opt/homebrew/opt/ruby/bin"

    def test_darwin_falls_back_without_brew(self, probe):
        registry = builtin_registry(Platform.DARWIN, probe)
        plan = registry["dart"].resolve(UseContext(runtime="dart"))
        assert plan.env["DART_SDK"] == "/usr/local/opt/dart-sdk/libexec"
        assert ("brew", "--prefix", "dart-sdk") in probe.queries

    def test_linux_never_probes_for_apt_recipes(self, probe):
        registry = builtin_registry(Platform.LINUX, probe)
        for name in ("php", "redis", "postgres", "ruby"):
            registry[name].resolve(UseContext(runtime=name))
        assert probe.queries == []


class TestPostgres:
    @pytest.mark.parametrize("platform", [Platform.DARWIN, Platform.LINUX])
    def test_preset_creates_database(self, platform, probe):
        plan = PostgresRecipe(platform, probe).resolve(
            UseContext(runtime="postgres", preset="app_dev")
        )
        last = plan.install_steps[-1]
        assert last.id == "create-database"
        assert "createdb app_dev" in last.cmd

    def test_no_preset_no_database(self, probe):
        plan = PostgresRecipe(Platform.LINUX, probe).resolve(UseContext(runtime="postgres"))
        assert all(s.id != "create-database" for s in plan.install_steps)


class TestOllama:
    def test_default_model(self, probe):
        registry = builtin_registry(Platform.LINUX, probe)
        plan = registry["ollama"].resolve(UseContext(runtime="ollama"))
        assert plan.install_steps[-1].cmd == "ollama pull llama3.2"
        assert plan.env == {"OLLAMA_HOST": "127.0.0.1:11434"}

    def test_preset_model(self, probe):
        registry = builtin_registry(Platform.DARWIN, probe)
        plan = registry["ollama"].resolve(UseContext(runtime="ollama", preset="mistral"))
        assert plan.install_steps[-1].id == "pull-mistral"


class TestMysql:
    def test_preset_creates_database(self, probe):
        plan = builtin_registry(Platform.LINUX, probe)["mysql"].resolve(
            UseContext(runtime="mysql", preset="shop")
        )
        assert plan.install_steps[-1].id == "create-database"
        assert "shop" in plan.install_steps[-1].cmd
        assert plan.env == {"MYSQL_HOST": "localhost"}


class TestNginx:
    def test_darwin_uses_homebrew_root(self):
        probe = MockProbe({("brew", "--prefix"): "/opt/homebrew"})
        plan = builtin_registry(Platform.DARWIN, probe)["nginx"].resolve(
            UseContext(runtime="nginx")
        )
        assert plan.env["NGINX_CONF_DIR"] == "/opt/homebrew/etc/nginx"
        assert plan.env["NGINX_PORT"] == "8080"


class TestPresetQuoting:
    def test_postgres_quotes_database(self, probe):
        plan = PostgresRecipe(Platform.LINUX, probe).resolve(
            UseContext(runtime="postgres", preset="my db; rm -rf ~")
        )
        step = plan.install_steps[-1]
        assert step.cmd == "createdb 'my db; rm -rf ~'"
        assert step.check_cmd.endswith("grep -qxF -- 'my db; rm -rf ~'")

    @pytest.mark.parametrize("platform", [Platform.DARWIN, Platform.LINUX])
    def test_mysql_quotes_database(self, platform, probe):
        plan = builtin_registry(platform, probe)["mysql"].resolve(
            UseContext(runtime="mysql", preset="it's")
        )
        step = plan.install_steps[-1]
        assert "CREATE DATABASE IF NOT EXISTS `it" in step.cmd
        assert "\"'\"" in step.cmd
        assert step.check_cmd.endswith("grep -qxF -- 'it'\"'\"'s'")

    def test_mysql_backtick_doubled(self, probe):
        plan = builtin_registry(Platform.LINUX, probe)["mysql"].resolve(
            UseContext(runtime="mysql", preset="a`b")
        )
        assert "`a``b`" in plan.install_steps[-1].cmd


class TestWordpress:
    def test_dependency_order(self, probe):
        registry = builtin_registry(Platform.LINUX, probe)
        order = resolve_dependencies("wordpress", registry)

        assert order[-1] == "wordpress"
        assert order.count("php") == 1
        assert order.index("php") < order.index("php-fpm")
        for dep in ("nginx", "php-fpm", "mysql"):
            assert order.index(dep) < order.index("wordpress")

    @pytest.mark.parametrize("platform", [Platform.DARWIN, Platform.LINUX])
    def test_default_database(self, platform, probe):
        plan = WordpressRecipe(platform, probe).resolve(UseContext(runtime="wordpress"))
        db_step = next(s for s in plan.install_steps if s.id == "setup-wp-database")
        assert "`wordpress`" in db_step.cmd
        assert plan.install_steps[-1].id == "wait-for-wordpress"

    def test_preset_names_database(self, probe):
        plan = WordpressRecipe(Platform.LINUX, probe).resolve(
            UseContext(runtime="wordpress", preset="blog")
        )
        config = next(s for s in plan.install_steps if s.id == "configure-wordpress")
        assert "define( 'DB_NAME', 'blog' );" in config.cmd
        assert plan.env == {"WORDPRESS_URL": "http://localhost:80"}

    def test_darwin_serves_from_homebrew_root(self):
        probe = MockProbe({("brew", "--prefix"): "/opt/homebrew"})
        plan = WordpressRecipe(Platform.DARWIN, probe).resolve(UseContext(runtime="wordpress"))
        nginx = next(s for s in plan.install_steps if s.id == "configure-nginx-wp")
        assert "/opt/homebrew/etc/nginx/servers/wordpress.conf" in nginx.cmd
        assert "root /opt/homebrew/var/www;" in nginx.cmd
        assert plan.env["WORDPRESS_URL"] == "http://localhost:8080"

    def test_salts_are_fresh(self, probe):
        recipe = WordpressRecipe(Platform.LINUX, probe)
        first = recipe.resolve(UseContext(runtime="wordpress"))
        second = recipe.resolve(UseContext(runtime="wordpress"))
        config = [
            next(s.cmd for s in plan.install_steps if s.id == "configure-wordpress")
            for plan in (first, second)
        ]
        assert config[0] != config[1]
