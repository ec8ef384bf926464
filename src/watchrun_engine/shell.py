"""Resolve how a configured command is turned into an argv."""

import os
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path

from watchrun_engine.errors import ConfigError
from watchrun_engine.models import Argv, CommandSpec, ShellLine

DEFAULT_SHELL = "/bin/sh"

# Snippet run before the command, keyed by shell name
RC_COMMANDS = {
    "zsh": "source ~/.zshrc 2>/dev/null || true",
    "bash": "source ~/.bashrc 2>/dev/null || source ~/.bash_profile 2>/dev/null || true",
}


@dataclass(frozen=True)
class UserShell:
    """The user's interactive shell and the snippet that loads its startup files."""

    path: str
    rc_command: str = "true"

    @property
    def name(self) -> str:
        return Path(self.path).name or "sh"


def get_user_shell(environ: dict[str, str] | None = None) -> UserShell:
    """Discover the user's shell from ``$SHELL``.

    Args:
        environ: Environment to read (defaults to os.environ)

    Returns:
        UserShell, falling back to /bin/sh
    """
    environ = os.environ if environ is None else environ
    shell = environ.get("SHELL")
    if not shell:
        return UserShell(DEFAULT_SHELL)

    name = Path(shell).name or "sh"
    return UserShell(shell, RC_COMMANDS.get(name, "true"))


def build_argv(spec: CommandSpec, shell: UserShell | None = None, platform: str | None = None) -> list[str]:
    """Build the argv used to spawn a command spec.

    Args:
        spec: Shell line or pre-tokenized argv
        shell: Shell used for shell lines (discovered when omitted)
        platform: Platform name, defaults to sys.platform

    Returns:
        Program followed by its arguments
    """
    if isinstance(spec, Argv):
        return [spec.program, *spec.args]

    platform = platform or sys.platform
    if platform.startswith("win"):
        return ["cmd", "/C", spec.line]

    shell = shell or get_user_shell()
    return [shell.path, "-l", "-c", f"{shell.rc_command}; {spec.line}"]


def parse_command(value: str | list[str] | tuple[str, ...], use_shell: bool = True) -> CommandSpec:
    """Resolve a configured command into a CommandSpec.

    Strings become shell lines unless ``use_shell`` is False, in which case
    they are tokenized with shlex. Lists are always taken as argv.

    Args:
        value: Command string or argv list
        use_shell: Whether strings run through the login shell

    Returns:
        ShellLine or Argv

    Raises:
        ConfigError: If the command is empty or cannot be tokenized
    """
    if isinstance(value, (list, tuple)):
        tokens = [str(token) for token in value]
        if not tokens or not tokens[0].strip():
            raise ConfigError("Command argv must not be empty")
        return Argv(tokens[0], tuple(tokens[1:]))

    if not isinstance(value, str):
        raise ConfigError(f"Command must be a string or a list of strings, got {type(value).__name__}")

    line = value.strip()
    if not line:
        raise ConfigError("Command must not be empty")

    if use_shell:
        return ShellLine(line)

    try:
        tokens = shlex.split(line)
    except ValueError as e:
        raise ConfigError(f"Could not parse command {line!r}: {e}") from e
    if not tokens:
        raise ConfigError("Command must not be empty")
    return Argv(tokens[0], tuple(tokens[1:]))
