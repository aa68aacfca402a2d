"""Tests for layered configuration loading."""

from pathlib import Path

import pytest

from paranoid_space.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_PROSE_ATTRIBUTES,
    ENV_MAX_DEPTH,
    ConfigLoader,
    SpacingConfig,
    default_config,
)
from paranoid_space.errors import ConfigError

from conftest import write_file


def test_defaults():
    config = default_config()
    assert config.max_depth == DEFAULT_MAX_DEPTH == 256
    assert config.html.prose_attributes == list(DEFAULT_PROSE_ATTRIBUTES)
    assert config.json_format.space_keys is True
    assert config.json5.space_keys is False
    assert config.extensions == {}


def test_empty_directory_gives_defaults(tmp_path: Path):
    assert ConfigLoader.load_effective_config(tmp_path) == SpacingConfig()


def test_pyproject_table(tmp_path: Path):
    write_file(tmp_path / "pyproject.toml", """
[project]
name = "demo"

[tool.paranoid-space]
max_depth = 64

[tool.paranoid-space.json]
space_keys = false

[tool.paranoid-space.extensions]
vue = "html"
""")
    config = ConfigLoader.load_effective_config(tmp_path)
    assert config.max_depth == 64
    assert config.json_format.space_keys is False
    assert config.extensions == {".vue": "html"}


def test_project_file_overrides_pyproject(tmp_path: Path):
    write_file(tmp_path / "pyproject.toml", "[tool.paranoid-space]\nmax_depth = 64\n")
    write_file(tmp_path / ".paranoid-space.toml", "max_depth = 32\n[html]\nprose_attributes = ['Title']\n")
    config = ConfigLoader.load_effective_config(tmp_path)
    assert config.max_depth == 32
    assert config.html.prose_attributes == ["title"]


def test_explicit_file_and_environment_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    write_file(tmp_path / ".paranoid-space.toml", "max_depth = 32\n[json5]\nspace_keys = true\n")
    explicit = write_file(tmp_path / "custom.toml", "max_depth = 16\n")

    config = ConfigLoader.load_effective_config(tmp_path, config_file=explicit)
    assert config.max_depth == 16
    assert config.json5.space_keys is True

    monkeypatch.setenv(ENV_MAX_DEPTH, "8")
    assert ConfigLoader.load_effective_config(tmp_path, config_file=explicit).max_depth == 8


def test_defaults_to_current_directory(tmp_path: Path):
    write_file(tmp_path / ".paranoid-space.toml", "max_depth = 12\n")
    assert ConfigLoader.load_effective_config().max_depth == 12


class TestInvalidConfig:
    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader.load_effective_config(tmp_path, config_file=tmp_path / "missing.toml")

    def test_malformed_toml(self, tmp_path: Path):
        write_file(tmp_path / ".paranoid-space.toml", "max_depth = \n")
        with pytest.raises(ConfigError, match="Failed to load TOML"):
            ConfigLoader.load_effective_config(tmp_path)

    def test_unknown_key(self, tmp_path: Path):
        write_file(tmp_path / ".paranoid-space.toml", "max_dept = 3\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            ConfigLoader.load_effective_config(tmp_path)

    def test_non_positive_depth(self):
        with pytest.raises(ConfigError):
            ConfigLoader.from_dict({"max_depth": 0})

    def test_bad_environment_value(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(ENV_MAX_DEPTH, "deep")
        with pytest.raises(ConfigError, match=ENV_MAX_DEPTH):
            ConfigLoader.load_effective_config(tmp_path)

    def test_tool_table_must_be_a_table(self, tmp_path: Path):
        write_file(tmp_path / "pyproject.toml", "[tool]\nparanoid-space = 1\n")
        with pytest.raises(ConfigError, match="must be a table"):
            ConfigLoader.load_effective_config(tmp_path)
