"""Configuration loading for watchrun."""

import logging
import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from watchrun_engine.errors import ConfigError
from watchrun_engine.filters import normalize_extensions
from watchrun_engine.models import WatchConfig
from watchrun_engine.shell import parse_command

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "directory",
    "command",
    "extensions",
    "quiet_period_ms",
    "window_ms",
    "tick_ms",
    "build_tool_mode",
    "run_on_start",
    "use_shell",
}


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read the ``[watch]`` table of a TOML config file.

    A relative ``directory`` is resolved against the config file's folder.

    Args:
        path: Path to TOML config file

    Returns:
        Raw settings, keyed like build_watch_config()'s parameters

    Raises:
        ConfigError: If the file is missing or malformed
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}\nRun 'watchrun --init' to create a default config.")

    try:
        raw = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    watch = raw.get("watch", {})
    if not isinstance(watch, dict):
        raise ConfigError(f"[watch] in {path} must be a table")

    for key in sorted(set(watch) - KNOWN_KEYS):
        logger.warning(f"Ignoring unknown key '{key}' in {path}")

    settings = {key: value for key, value in watch.items() if key in KNOWN_KEYS}
    if "directory" in settings:
        if not isinstance(settings["directory"], str):
            raise ConfigError(f"directory in {path} must be a string, got {settings['directory']!r}")
        settings["directory"] = path.parent / settings["directory"]
    return settings


def _split_extensions(value: str | Iterable[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split(",")
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError(f"Extensions must be a string or a list of strings, got {value!r}")
    items = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"Extensions must be strings, got {item!r}")
        items.extend(item.split(","))
    return items


def _milliseconds(name: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer number of milliseconds, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {value}")
    return value


def _flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


def build_watch_config(
    directory: str | Path | None,
    command: str | list[str] | None,
    extensions: str | Iterable[str] | None = None,
    quiet_period_ms: int = 500,
    window_ms: int = 1000,
    tick_ms: int = 100,
    build_tool_mode: bool = False,
    run_on_start: bool = False,
    use_shell: bool = True,
) -> WatchConfig:
    """Validate settings and build an immutable WatchConfig.

    Args:
        directory: Directory to watch
        command: Shell line, or argv list
        extensions: Extensions as a list and/or comma-separated strings
        quiet_period_ms: Silence required before firing
        window_ms: Trailing event window
        tick_ms: Poll tick
        build_tool_mode: Flag stdout error/warning markers
        run_on_start: Run the command once at startup
        use_shell: Run string commands through the login shell

    Returns:
        WatchConfig

    Raises:
        ConfigError: If any setting is missing or invalid
    """
    if directory is None or str(directory).strip() == "":
        raise ConfigError("No directory to watch (use -d/--directory or 'directory' in the config file)")
    if not isinstance(directory, (str, Path)):
        raise ConfigError(f"Directory must be a path, got {directory!r}")
    if command is None:
        raise ConfigError("No command to run (use -c/--command or 'command' in the config file)")

    return WatchConfig(
        directory=Path(directory).expanduser().resolve(),
        command=parse_command(command, use_shell=_flag("use_shell", use_shell)),
        extensions=normalize_extensions(_split_extensions(extensions)),
        quiet_period_ms=_milliseconds("quiet_period_ms", quiet_period_ms, 0),
        window_ms=_milliseconds("window_ms", window_ms, 0),
        tick_ms=_milliseconds("tick_ms", tick_ms, 1),
        build_tool_mode=_flag("build_tool_mode", build_tool_mode),
        run_on_start=_flag("run_on_start", run_on_start),
    )


def merge_settings(file_settings: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay command-line values on config-file values. None means "not given"."""
    merged = dict(file_settings)
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return merged
