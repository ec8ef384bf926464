"""
The watch loop: raw events in, debounced command runs out.

Provides a frontend-agnostic driver that:
- Receives raw events from an event source with a fixed poll tick
- Classifies and filters them, feeding the debouncer
- Runs the command through the supervisor when a burst goes quiet
- Reports everything through a RunNotifier

The same class backs the CLI and any embedding host.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from enum import Enum

from watchrun_engine.debouncer import Debouncer
from watchrun_engine.errors import WatchSourceDisconnected, WatchSourceError
from watchrun_engine.file_watcher import WatchdogEventSource
from watchrun_engine.filters import is_relevant, matches
from watchrun_engine.models import ChangeEvent, CommandResult, ShellLine, WatchConfig
from watchrun_engine.notifier import NoOpNotifier, RunNotifier
from watchrun_engine.shell import UserShell, get_user_shell
from watchrun_engine.supervisor import CommandSupervisor
from watchrun_engine.watchers import EventSource

logger = logging.getLogger(__name__)


class OrchestratorState(Enum):
    """Where the watch loop is."""

    WATCHING = "watching"
    PENDING = "pending"
    RUNNING = "running"
    STOPPED = "stopped"


class Orchestrator:
    """Drives one directory watch and its debounced command runs.

    Only the loop task touches the debouncer, so no locking is needed.

    Usage (Embedded):
        orchestrator = Orchestrator(config, notifier=my_notifier)
        try:
            await orchestrator.run()
        except WatchSourceDisconnected:
            ...
    """

    def __init__(
        self,
        config: WatchConfig,
        source: EventSource | None = None,
        notifier: RunNotifier | None = None,
        supervisor: CommandSupervisor | None = None,
        shell: UserShell | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize orchestrator.

        Args:
            config: Resolved watch configuration
            source: Raw event source (defaults to a watchdog source on config.directory)
            notifier: Notification handler (defaults to NoOpNotifier - silent)
            supervisor: Command supervisor (defaults to one streaming into the notifier)
            shell: Shell for shell-line commands (discovered once when omitted)
            clock: Monotonic clock used for debouncing
        """
        self.config = config
        self.notifier = notifier or NoOpNotifier()
        self.source = source or WatchdogEventSource(config.directory, clock=clock)
        if shell is None and isinstance(config.command, ShellLine):
            shell = get_user_shell()
        self.shell = shell
        self.supervisor = supervisor or CommandSupervisor(
            on_line=self.notifier.output,
            build_tool_mode=config.build_tool_mode,
            shell=shell,
        )
        self.debouncer = Debouncer(window=config.window, quiet_period=config.quiet_period)
        self._clock = clock
        self._state = OrchestratorState.WATCHING
        self.fire_count = 0

    @property
    def state(self) -> OrchestratorState:
        return self._state

    async def run(self) -> None:
        """Watch until the event source disconnects.

        Raises:
            WatchSetupError: If the source cannot attach to the directory
            WatchSourceDisconnected: When the source goes away (always, eventually)
        """
        self.source.start(asyncio.get_running_loop())
        try:
            self.notifier.watching(self.config, self.shell.path if self.shell else None)
            if self.config.run_on_start:
                await self.run_once()
            self.notifier.waiting()

            while True:
                try:
                    event = await self.source.recv(self.config.tick)
                except TimeoutError:
                    pass
                except WatchSourceDisconnected:
                    self._state = OrchestratorState.STOPPED
                    raise
                except WatchSourceError as e:
                    logger.warning(f"Watch error: {e}")
                else:
                    self.handle_event(event)

                await self.poll()
        finally:
            self.source.stop()
            self._state = OrchestratorState.STOPPED

    def handle_event(self, event: ChangeEvent) -> bool:
        """Classify and filter a raw event, recording it if it qualifies.

        Args:
            event: Raw change event

        Returns:
            True if the event was recorded
        """
        if not is_relevant(event.kind):
            logger.debug(f"Ignoring {event.kind.value} event for {event.paths}")
            return False

        if not any(matches(path, self.config.extensions) for path in event.paths):
            logger.debug(f"Ignoring {event.paths}: extension not watched")
            return False

        self.debouncer.record(self._clock())
        if self._state is OrchestratorState.WATCHING:
            self._state = OrchestratorState.PENDING
        return True

    async def poll(self) -> CommandResult | None:
        """Run the command if the pending burst has gone quiet.

        Returns:
            The CommandResult if the command ran, else None
        """
        if not self.debouncer.should_fire(self._clock()):
            return None

        self.notifier.change_detected()
        result = await self.run_once()
        self.debouncer.reset()
        self._state = OrchestratorState.WATCHING
        self.notifier.waiting()
        return result

    async def run_once(self) -> CommandResult:
        """Run the command now and report its result.

        Returns:
            CommandResult of the invocation
        """
        previous = self._state
        self._state = OrchestratorState.RUNNING
        self.fire_count += 1
        try:
            result = await self.supervisor.run(self.config.command, self.config.directory)
        finally:
            self._state = previous
        self.notifier.finished(result)
        return result
