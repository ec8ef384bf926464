"""Raw event source backed by a watchdog observer."""

import asyncio
import logging
import os
import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from watchrun_engine.errors import WatchSetupError, WatchSourceDisconnected
from watchrun_engine.filters import kind_from_watchdog
from watchrun_engine.models import ChangeEvent
from watchrun_engine.watchers import EventChannel

logger = logging.getLogger(__name__)


class _ChannelHandler(FileSystemEventHandler):
    """Forwards every watchdog event into an EventChannel.

    Runs on the observer thread; filtering happens in the watch loop.
    """

    def __init__(self, channel: EventChannel, clock: Callable[[], float]):
        """Initialize handler.

        Args:
            channel: Channel feeding the watch loop
            clock: Monotonic clock used to stamp events
        """
        self.channel = channel
        self.clock = clock

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Convert and forward an event."""
        try:
            paths = [Path(os.fsdecode(event.src_path))]
            dest_path = getattr(event, "dest_path", "")
            if dest_path:
                paths.append(Path(os.fsdecode(dest_path)))
            self.channel.send(ChangeEvent(kind_from_watchdog(event), tuple(paths), self.clock()))
        except Exception as e:
            logger.error(f"Failed to forward {event!r}: {e}")
            self.channel.send_error(e)


class WatchdogEventSource:
    """Watches one directory tree recursively with watchdog."""

    def __init__(
        self,
        directory: str | Path,
        clock: Callable[[], float] = time.monotonic,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        """Initialize source.

        Args:
            directory: Directory to watch
            clock: Clock used to stamp events
            observer_factory: Creates the watchdog observer
        """
        self.directory = Path(directory)
        self.channel = EventChannel()
        self._handler = _ChannelHandler(self.channel, clock)
        self._observer_factory = observer_factory
        self._observer: Observer | None = None
        self._stopping = False

    def start(self, loop: asyncio.AbstractEventLoop) -> None:
        """Attach the observer to the directory.

        Args:
            loop: Running loop that will call recv()

        Raises:
            WatchSetupError: If the directory cannot be watched
        """
        if self._observer is not None:
            return

        if not self.directory.is_dir():
            raise WatchSetupError(f"Watch directory does not exist or is not a directory: {self.directory}")

        self.channel.attach(loop)
        observer = self._observer_factory()
        try:
            observer.schedule(self._handler, str(self.directory), recursive=True)
            observer.start()
        except OSError as e:
            raise WatchSetupError(f"Cannot watch {self.directory}: {e}") from e

        self._observer = observer
        self._stopping = False
        logger.info(f"Watching {self.directory} (recursive)")

    def stop(self) -> None:
        """Stop the observer and disconnect the channel."""
        if self._observer is None:
            return

        self._stopping = True
        if self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=2.0)
        self._observer = None
        self.channel.close()
        logger.info("Stopped file watcher")

    @property
    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    async def recv(self, timeout: float) -> ChangeEvent:
        """Wait up to ``timeout`` seconds for the next event.

        Raises:
            TimeoutError: No event arrived in time
            WatchSourceError: A single delivery failed
            WatchSourceDisconnected: The observer is gone
        """
        try:
            return await self.channel.recv(timeout)
        except TimeoutError:
            if self._observer is not None and not self._stopping and not self._observer.is_alive():
                raise WatchSourceDisconnected(f"Watch observer for {self.directory} stopped unexpectedly")
            raise
