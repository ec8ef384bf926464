"""watchrun-engine: Debounced file watching and command supervision, UI-agnostic."""

__version__ = "0.1.0"

# Config
from watchrun_engine.config import build_watch_config, load_config_file

# Engine
from watchrun_engine.debouncer import Debouncer
from watchrun_engine.errors import (
    ConfigError,
    WatchrunError,
    WatchSetupError,
    WatchSourceDisconnected,
    WatchSourceError,
)
from watchrun_engine.filters import is_relevant, matches
from watchrun_engine.models import (
    Argv,
    ChangeEvent,
    CommandResult,
    CommandSpec,
    EventKind,
    OutputLine,
    RunStatus,
    Severity,
    ShellLine,
    Stream,
    WatchConfig,
)
from watchrun_engine.notifier import LoggingNotifier, NoOpNotifier, RunNotifier
from watchrun_engine.orchestrator import Orchestrator, OrchestratorState
from watchrun_engine.supervisor import CommandSupervisor, classify_line

__all__ = [
    "__version__",
    # Models
    "Argv",
    "ChangeEvent",
    "CommandResult",
    "CommandSpec",
    "EventKind",
    "OutputLine",
    "RunStatus",
    "Severity",
    "ShellLine",
    "Stream",
    "WatchConfig",
    # Errors
    "WatchrunError",
    "ConfigError",
    "WatchSetupError",
    "WatchSourceError",
    "WatchSourceDisconnected",
    # Engine
    "Debouncer",
    "CommandSupervisor",
    "classify_line",
    "Orchestrator",
    "OrchestratorState",
    "is_relevant",
    "matches",
    # Notifiers
    "RunNotifier",
    "NoOpNotifier",
    "LoggingNotifier",
    # Config
    "build_watch_config",
    "load_config_file",
]
