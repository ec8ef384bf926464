"""Tests for shell discovery and command resolution."""

import pytest

from watchrun_engine.errors import ConfigError
from watchrun_engine.models import Argv, ShellLine
from watchrun_engine.shell import UserShell, build_argv, get_user_shell, parse_command


class TestGetUserShell:
    """Tests for get_user_shell."""

    def test_zsh_sources_zshrc(self):
        shell = get_user_shell({"SHELL": "/usr/bin/zsh"})
        assert shell.path == "/usr/bin/zsh"
        assert shell.name == "zsh"
        assert "~/.zshrc" in shell.rc_command

    def test_bash_sources_bashrc_then_profile(self):
        shell = get_user_shell({"SHELL": "/bin/bash"})
        assert "~/.bashrc" in shell.rc_command
        assert "~/.bash_profile" in shell.rc_command

    def test_other_shell_runs_true(self):
        shell = get_user_shell({"SHELL": "/usr/bin/fish"})
        assert shell.rc_command == "true"

    def test_missing_shell_falls_back_to_sh(self):
        shell = get_user_shell({})
        assert shell == UserShell("/bin/sh", "true")


class TestBuildArgv:
    """Tests for build_argv."""

    def test_argv_runs_directly(self):
        assert build_argv(Argv("cargo", ("test", "--quiet"))) == ["cargo", "test", "--quiet"]

    def test_shell_line_uses_login_shell(self):
        shell = UserShell("/bin/bash", "source ~/.bashrc")
        argv = build_argv(ShellLine("make test"), shell, platform="linux")
        assert argv == ["/bin/bash", "-l", "-c", "source ~/.bashrc; make test"]

    def test_shell_line_on_windows_uses_cmd(self):
        argv = build_argv(ShellLine("nmake"), UserShell("/bin/bash"), platform="win32")
        assert argv == ["cmd", "/C", "nmake"]


class TestParseCommand:
    """Tests for parse_command."""

    def test_string_becomes_shell_line(self):
        assert parse_command("  cargo test  ") == ShellLine("cargo test")

    def test_string_without_shell_is_tokenized(self):
        assert parse_command("pytest -k 'a and b'", use_shell=False) == Argv("pytest", ("-k", "a and b"))

    def test_list_becomes_argv(self):
        assert parse_command(["make", "all"]) == Argv("make", ("all",))

    @pytest.mark.parametrize("value", ["", "   ", []])
    def test_empty_command_rejected(self, value):
        with pytest.raises(ConfigError):
            parse_command(value)

    def test_unbalanced_quotes_rejected_without_shell(self):
        with pytest.raises(ConfigError, match="Could not parse"):
            parse_command("echo 'oops", use_shell=False)

    def test_wrong_type_rejected(self):
        with pytest.raises(ConfigError):
            parse_command(42)
