"""Pluggable notification protocol for watchrun_engine.

Decouples the watch loop from how results are shown. The terminal frontend
renders them with rich; tests record them; embedders can log them.
"""

import logging
from typing import Protocol

from watchrun_engine.models import CommandResult, OutputLine, WatchConfig


class RunNotifier(Protocol):
    """Protocol for watch-loop notifications - host provides the implementation."""

    def watching(self, config: WatchConfig, shell: str | None) -> None:
        """Watch started; summarize the configuration."""
        ...

    def change_detected(self) -> None:
        """A debounced burst fired and the command is about to run."""
        ...

    def output(self, line: OutputLine) -> None:
        """One line of command output, as it arrives."""
        ...

    def finished(self, result: CommandResult) -> None:
        """The command reached a terminal status."""
        ...

    def waiting(self) -> None:
        """Back to waiting for changes."""
        ...


class NoOpNotifier:
    """Silent no-op notifier - default for embedded mode."""

    def watching(self, config: WatchConfig, shell: str | None) -> None:
        """Do nothing."""
        pass

    def change_detected(self) -> None:
        """Do nothing."""
        pass

    def output(self, line: OutputLine) -> None:
        """Do nothing."""
        pass

    def finished(self, result: CommandResult) -> None:
        """Do nothing."""
        pass

    def waiting(self) -> None:
        """Do nothing."""
        pass


class LoggingNotifier:
    """Implementation using stdlib logging - for debugging/development."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("watchrun_engine.run")

    def watching(self, config: WatchConfig, shell: str | None) -> None:
        self.logger.info(f"Watching {config.directory} for {sorted(config.extensions) or 'all files'}")

    def change_detected(self) -> None:
        self.logger.info("File change detected")

    def output(self, line: OutputLine) -> None:
        level = logging.WARNING if line.is_error else logging.INFO
        self.logger.log(level, line.text)

    def finished(self, result: CommandResult) -> None:
        level = logging.INFO if result.succeeded else logging.ERROR
        self.logger.log(level, result.describe())

    def waiting(self) -> None:
        self.logger.info("Waiting for file changes")
