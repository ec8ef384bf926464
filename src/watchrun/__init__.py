"""watchrun: Rerun a command whenever files in a directory change."""

__version__ = "0.1.0"

# Public API
from watchrun.console import ConsoleNotifier
from watchrun_engine.orchestrator import Orchestrator

__all__ = [
    "__version__",
    # Primary components
    "ConsoleNotifier",
    "Orchestrator",
]
