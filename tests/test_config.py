"""Tests for configuration loading."""

import pytest

from watchrun_engine.config import build_watch_config, load_config_file, merge_settings
from watchrun_engine.errors import ConfigError
from watchrun_engine.models import Argv, ShellLine


@pytest.fixture
def tmp_config(tmp_path):
    """Create a temporary config file."""
    (tmp_path / "project").mkdir()
    config = tmp_path / "watchrun.toml"
    config.write_text(
        """
[watch]
directory = "project"
extensions = ["rs", ".toml"]
command = "cargo test"
quiet_period_ms = 250
build_tool_mode = true
"""
    )
    return config


class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_reads_watch_table(self, tmp_config):
        settings = load_config_file(tmp_config)

        assert settings["command"] == "cargo test"
        assert settings["extensions"] == ["rs", ".toml"]
        assert settings["quiet_period_ms"] == 250
        assert settings["build_tool_mode"] is True

    def test_directory_relative_to_config_file(self, tmp_config):
        settings = load_config_file(tmp_config)
        assert settings["directory"] == tmp_config.parent / "project"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config_file(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("[watch\ncommand = ")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config_file(config)

    def test_unknown_keys_dropped(self, tmp_path):
        config = tmp_path / "watchrun.toml"
        config.write_text('[watch]\ncommand = "make"\ncolour = "blue"\n')
        assert load_config_file(config) == {"command": "make"}


class TestBuildWatchConfig:
    """Tests for build_watch_config."""

    def test_defaults(self, tmp_path):
        config = build_watch_config(directory=tmp_path, command="make")

        assert config.directory == tmp_path.resolve()
        assert config.command == ShellLine("make")
        assert config.extensions == frozenset()
        assert config.quiet_period == 0.5
        assert config.window == 1.0
        assert config.tick == 0.1
        assert config.build_tool_mode is False

    def test_comma_separated_extensions(self, tmp_path):
        config = build_watch_config(directory=tmp_path, command="make", extensions=["rs,toml", "json"])
        assert config.extensions == frozenset({"rs", "toml", "json"})

    def test_no_shell_tokenizes(self, tmp_path):
        config = build_watch_config(directory=tmp_path, command="cargo test", use_shell=False)
        assert config.command == Argv("cargo", ("test",))

    def test_empty_command_is_config_error(self, tmp_path):
        with pytest.raises(ConfigError):
            build_watch_config(directory=tmp_path, command="  ")

    def test_missing_command(self, tmp_path):
        with pytest.raises(ConfigError, match="No command"):
            build_watch_config(directory=tmp_path, command=None)

    def test_missing_directory(self):
        with pytest.raises(ConfigError, match="No directory"):
            build_watch_config(directory=None, command="make")

    @pytest.mark.parametrize(
        "overrides",
        [{"tick_ms": 0}, {"quiet_period_ms": -1}, {"window_ms": "fast"}, {"tick_ms": True}],
    )
    def test_invalid_timings(self, tmp_path, overrides):
        with pytest.raises(ConfigError):
            build_watch_config(directory=tmp_path, command="make", **overrides)


def test_merge_settings_prefers_given_overrides():
    merged = merge_settings(
        {"command": "make", "quiet_period_ms": 200},
        {"command": "ninja", "quiet_period_ms": None},
    )
    assert merged == {"command": "ninja", "quiet_period_ms": 200}


class TestConfigTypes:
    """Tests for values of the wrong type."""

    @pytest.mark.parametrize("key", ["build_tool_mode", "run_on_start", "use_shell"])
    def test_string_flag_rejected(self, tmp_path, key):
        with pytest.raises(ConfigError, match=key):
            build_watch_config(directory=tmp_path, command="make", **{key: "false"})

    def test_non_path_directory_rejected(self):
        with pytest.raises(ConfigError, match="Directory"):
            build_watch_config(directory=5, command="make")

    def test_non_list_extensions_rejected(self, tmp_path):
        with pytest.raises(ConfigError, match="Extensions"):
            build_watch_config(directory=tmp_path, command="make", extensions=5)

    def test_numeric_directory_in_file(self, tmp_path):
        config = tmp_path / "watchrun.toml"
        config.write_text('[watch]\ndirectory = 5\ncommand = "make"\n')

        with pytest.raises(ConfigError, match="directory"):
            load_config_file(config)

    def test_numeric_extensions_in_file(self, tmp_path):
        config = tmp_path / "watchrun.toml"
        config.write_text('[watch]\ndirectory = "."\ncommand = "make"\nextensions = 5\n')
        settings = load_config_file(config)

        with pytest.raises(ConfigError, match="Extensions"):
            build_watch_config(**settings)
