"""
Tests for configuration loading — lookup order, defaults, and overrides.
"""

from pathlib import Path

import pytest

from envkit.core.config.loader import (
    CONFIG_ENV_VAR,
    STATE_FILE_ENV_VAR,
    default_config_path,
    find_config_file,
    load_settings,
)
from envkit.core.errors import ConfigError
from envkit.core.models.settings import Settings
from envkit.core.persistence.state_file import default_state_path


class TestFindConfigFile:
    def test_explicit_path_wins(self, tmp_path: Path):
        explicit = tmp_path / "a.yml"
        path, explicit_flag = find_config_file(explicit, {CONFIG_ENV_VAR: str(tmp_path / "b.yml")})
        assert path == explicit
        assert explicit_flag

    def test_env_var(self, tmp_path: Path):
        path, explicit_flag = find_config_file(None, {CONFIG_ENV_VAR: str(tmp_path / "b.yml")})
        assert path == tmp_path / "b.yml"
        assert explicit_flag

    def test_default(self):
        path, explicit_flag = find_config_file(None, {})
        assert path == default_config_path()
        assert not explicit_flag

    def test_default_config_path_for_home(self, tmp_path: Path):
        assert default_config_path(tmp_path) == tmp_path / ".config" / "envkit" / "config.yml"


class TestLoadSettings:
    def test_defaults_when_default_file_missing(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        settings = load_settings(environ={})
        assert settings.state_file == tmp_path / ".envkit" / "shellenv"
        assert settings.recipe_dirs == []

    def test_explicit_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "missing.yml", environ={})

    def test_reads_yaml(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text(
            f"state_file: {tmp_path}/state/env\n"
            f"recipe_dirs:\n  - {tmp_path}/recipes\n"
        )
        settings = load_settings(config, environ={})
        assert settings.state_file == tmp_path / "state" / "env"
        assert settings.recipe_dirs == [tmp_path / "recipes"]

    def test_empty_file_means_defaults(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("")
        assert isinstance(load_settings(config, environ={}), Settings)

    def test_state_file_env_override(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("state_file: /somewhere/else\n")
        settings = load_settings(config, environ={STATE_FILE_ENV_VAR: str(tmp_path / "s")})
        assert settings.state_file == tmp_path / "s"

    def test_tilde_expanded(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = tmp_path / "config.yml"
        config.write_text("state_file: ~/custom/shellenv\n")
        settings = load_settings(config, environ={})
        assert settings.state_file == tmp_path / "custom" / "shellenv"

    def test_invalid_yaml(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("state_file: [unclosed\n")
        with pytest.raises(ConfigError):
            load_settings(config, environ={})

    def test_not_a_mapping(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_settings(config, environ={})

    def test_unknown_key(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("colour: blue\n")
        with pytest.raises(ConfigError):
            load_settings(config, environ={})


class TestDefaultStatePath:
    def test_under_home(self, tmp_path: Path):
        assert default_state_path(tmp_path) == tmp_path / ".envkit" / "shellenv"
