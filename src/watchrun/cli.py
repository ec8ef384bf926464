"""CLI entry point for watchrun: watch a directory and rerun a command on change."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from watchrun import __version__
from watchrun.console import ConsoleNotifier
from watchrun_engine.config import build_watch_config, load_config_file, merge_settings
from watchrun_engine.errors import ConfigError, WatchSetupError, WatchSourceDisconnected
from watchrun_engine.models import WatchConfig
from watchrun_engine.orchestrator import Orchestrator

DEFAULT_CONFIG_NAME = "watchrun.toml"

# Default config template for a Python project
DEFAULT_CONFIG_TEMPLATE = """\
# Auto-generated watchrun.toml

[watch]
directory = "."
extensions = ["py", "toml"]
command = "pytest -q"
quiet_period_ms = 500
window_ms = 1000
tick_ms = 100
build_tool_mode = false
run_on_start = false
"""

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def create_default_config(config_path: Path) -> bool:
    """
    Create a default watchrun.toml if it doesn't exist.

    Args:
        config_path: Path where config should be created

    Returns:
        True if config was created, False if it already exists

    Raises:
        PermissionError: If unable to write to the directory
        OSError: If other file system errors occur
    """
    if config_path.exists():
        return False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TEMPLATE)
    return True


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="watchrun",
        description="Watch a directory and rerun a command when matching files change.",
        epilog="Examples:\n"
        "  watchrun -d . -c 'cargo test' -e rs,toml   # Rerun tests on Rust changes\n"
        "  watchrun -d src -c 'make' --build-tool     # Highlight compiler errors\n"
        "  watchrun --init                            # Create watchrun.toml\n"
        "  watchrun --config watchrun.toml            # Use a config file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("-d", "--directory", help="Directory to watch for changes")
    parser.add_argument("-c", "--command", help="Command to execute when changes are detected")
    parser.add_argument(
        "-e",
        "--extensions",
        action="append",
        help="File extensions to watch, comma-separated (e.g. rs,toml,json). Default: all files",
    )
    parser.add_argument(
        "--config",
        help=f"Path to config file (default: ./{DEFAULT_CONFIG_NAME} if present)",
    )
    parser.add_argument("--quiet-period", type=int, metavar="MS", help="Silence before running (default: 500)")
    parser.add_argument("--window", type=int, metavar="MS", help="Event window (default: 1000)")
    parser.add_argument("--tick", type=int, metavar="MS", help="Poll interval (default: 100)")
    parser.add_argument(
        "--build-tool",
        action="store_true",
        help="Also highlight stdout lines containing 'error:' or 'warning:'",
    )
    parser.add_argument(
        "--no-shell",
        action="store_true",
        help="Split the command into arguments and run it directly, without a login shell",
    )
    parser.add_argument("--run-on-start", action="store_true", help="Run the command once before watching")
    parser.add_argument("--init", action="store_true", help=f"Create a default {DEFAULT_CONFIG_NAME} and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    """Send watchrun diagnostics to stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    for name in ("watchrun", "watchrun_engine"):
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not logger.handlers:
            logger.addHandler(handler)


def resolve_config(args: argparse.Namespace) -> WatchConfig:
    """
    Combine the config file (if any) with command-line options.

    Command-line options win over config-file values.

    Raises:
        ConfigError: If the combined settings are invalid
    """
    file_settings: dict[str, Any] = {}
    if args.config:
        file_settings = load_config_file(Path(args.config).resolve())
    elif Path(DEFAULT_CONFIG_NAME).exists():
        file_settings = load_config_file(Path(DEFAULT_CONFIG_NAME).resolve())

    overrides = {
        "directory": args.directory,
        "command": args.command,
        "extensions": args.extensions,
        "quiet_period_ms": args.quiet_period,
        "window_ms": args.window,
        "tick_ms": args.tick,
        "build_tool_mode": True if args.build_tool else None,
        "run_on_start": True if args.run_on_start else None,
        "use_shell": False if args.no_shell else None,
    }
    settings = merge_settings(file_settings, overrides)
    return build_watch_config(
        directory=settings.pop("directory", None),
        command=settings.pop("command", None),
        **settings,
    )


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for watchrun CLI.

    Exit codes:
    - 1: watch could not start, or the watch source disconnected
    - 2: invalid configuration
    - 130: interrupted (Ctrl+C)
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    if args.init:
        config_path = Path(args.config or DEFAULT_CONFIG_NAME).resolve()
        try:
            if create_default_config(config_path):
                print(f"Created default config at: {config_path}")
            else:
                print(f"Config already exists: {config_path}")
        except OSError as e:
            print(f"Error: Failed to create config: {e}", file=sys.stderr)
            sys.exit(1)
        return

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    orchestrator = Orchestrator(config, notifier=ConsoleNotifier())

    try:
        asyncio.run(orchestrator.run())
    except KeyboardInterrupt:
        # Gracefully handle Ctrl+C
        sys.exit(130)
    except WatchSetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except WatchSourceDisconnected as e:
        print(f"Watch error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
